"""S3 object-store sink.

This module uploads replayed bytes to ``accepted/`` or ``quarantine/``
keys beneath an ``s3://bucket/prefix`` destination, plus a JSON verdict
object, using boto3 managed transfers.
"""

from __future__ import annotations

import io
import json
from typing import Any

from core.constants import ACCEPTED_DIR_NAME, QUARANTINE_DIR_NAME, VERDICT_SIDECAR_SUFFIX
from core.errors import SieveDependencyError, SieveSinkError
from core.logging_config import get_logger
from core.s3_uri import S3Location, parse_s3_uri
from core.types import IngestVerdict, UploadMetadata
from sinks.directory_sink import build_sidecar_payload
from sources.byte_source import ByteSource, ByteSourceReader

_LOGGER = get_logger(__name__)


class S3Sink:
    """Sink that streams uploads into an S3 bucket."""

    def __init__(self, destination_uri: str, s3_client: Any | None = None) -> None:
        self._location: S3Location = parse_s3_uri(destination_uri)
        self._s3_client = s3_client if s3_client is not None else create_s3_client()

    def persist(
        self,
        metadata: UploadMetadata,
        verdict: IngestVerdict,
        replay_source: ByteSource,
    ) -> None:
        """Upload replay bytes and the verdict sidecar.

        Raises:
            SieveSinkError: If either upload fails.
        """
        disposition = ACCEPTED_DIR_NAME if verdict.accepted else QUARANTINE_DIR_NAME
        payload_key = self._location.object_key(disposition, verdict.digest_hex)
        sidecar_key = f"{payload_key}{VERDICT_SIDECAR_SUFFIX}"
        sidecar_body = json.dumps(build_sidecar_payload(metadata, verdict), sort_keys=True)
        bucket = self._location.bucket
        try:
            self._s3_client.upload_fileobj(
                io.BufferedReader(ByteSourceReader(replay_source)),
                bucket,
                payload_key,
            )
            self._s3_client.put_object(
                Bucket=bucket,
                Key=sidecar_key,
                Body=sidecar_body.encode("utf-8"),
                ContentType="application/json",
            )
        except Exception as error:
            raise SieveSinkError(
                f"Failed to upload {metadata.filename} to s3://{bucket}/{payload_key}: {error}. "
                "Check AWS credentials and bucket permissions."
            ) from error
        _LOGGER.info(
            "sink_persisted",
            filename=metadata.filename,
            digest=verdict.digest_hex,
            disposition=disposition,
            path=f"s3://{bucket}/{payload_key}",
        )


def create_s3_client(region: str | None = None, profile: str | None = None) -> Any:
    """Create a boto3 S3 client.

    Args:
        region: Optional AWS region name.
        profile: Optional AWS profile name.

    Returns:
        Boto3 S3 client.

    Raises:
        SieveDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise SieveDependencyError(
            "S3 storage requires boto3, but it is not installed. "
            "Install boto3 to store uploads in s3:// destinations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if profile:
        session_kwargs["profile_name"] = profile
    if region:
        session_kwargs["region_name"] = region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")
