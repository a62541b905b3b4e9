"""Unit tests for the S3 sink."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from core.errors import SieveConfigError, SieveSinkError
from core.types import IngestVerdict, UploadMetadata
from sinks.s3_sink import S3Sink
from sources.stream_source import StreamByteSource


class _FakeS3Client:
    """Minimal stand-in for the boto3 S3 client surface used by the sink."""

    def __init__(self, fail: bool = False) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self._fail = fail

    def upload_fileobj(self, fileobj: Any, bucket: str, key: str) -> None:
        if self._fail:
            raise RuntimeError("access denied")
        self.objects[(bucket, key)] = fileobj.read()

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: str) -> None:
        self.objects[(Bucket, Key)] = Body


def _verdict(errors: tuple[str, ...] = ()) -> IngestVerdict:
    return IngestVerdict.from_measurements(
        detected_content_type="image/png",
        observed_length=4,
        digest_hex="cd" * 32,
        errors=errors,
    )


def test_s3_sink_uploads_payload_and_sidecar() -> None:
    """Accepted uploads should be streamed under the accepted prefix."""
    client = _FakeS3Client()
    sink = S3Sink("s3://uploads/incoming", s3_client=client)

    sink.persist(UploadMetadata("a.png"), _verdict(), StreamByteSource(io.BytesIO(b"\x89PNG")))

    payload_key = f"incoming/accepted/{'cd' * 32}"
    assert client.objects[("uploads", payload_key)] == b"\x89PNG"
    sidecar = json.loads(client.objects[("uploads", payload_key + ".json")])
    assert sidecar["verdict"]["detected_content_type"] == "image/png"


def test_s3_sink_quarantines_rejected_upload_without_prefix() -> None:
    """Rejected uploads should go under quarantine/ at the bucket root."""
    client = _FakeS3Client()
    sink = S3Sink("s3://uploads", s3_client=client)

    sink.persist(UploadMetadata("a.png"), _verdict(("bad",)), StreamByteSource(io.BytesIO(b"x")))

    assert ("uploads", f"quarantine/{'cd' * 32}") in client.objects


def test_s3_sink_wraps_upload_failures() -> None:
    """Client failures should surface as sink errors."""
    sink = S3Sink("s3://uploads/incoming", s3_client=_FakeS3Client(fail=True))

    with pytest.raises(SieveSinkError, match="access denied"):
        sink.persist(UploadMetadata("a.png"), _verdict(), StreamByteSource(io.BytesIO(b"x")))

    assert True


def test_s3_sink_rejects_invalid_uri() -> None:
    """Non-S3 destinations should be rejected at construction."""
    with pytest.raises(SieveConfigError):
        S3Sink("https://example.com/bucket", s3_client=_FakeS3Client())

    assert True
