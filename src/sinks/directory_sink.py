"""Local directory sink with accepted and quarantine areas.

Accepted uploads are written under ``accepted/`` and rejected uploads
under ``quarantine/``, both named by digest, each next to a JSON verdict
sidecar.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    ACCEPTED_DIR_NAME,
    PARTIAL_PAYLOAD_SUFFIX,
    QUARANTINE_DIR_NAME,
    VERDICT_SIDECAR_SUFFIX,
)
from core.errors import SieveError, SieveSinkError
from core.logging_config import get_logger
from core.types import IngestVerdict, UploadMetadata
from sources.byte_source import ByteSource, iter_chunks

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    """Location of one persisted upload.

    Attributes:
        payload_path: File holding the replayed bytes.
        sidecar_path: JSON file holding metadata and verdict.
        disposition: ``accepted`` or ``quarantine``.
    """

    payload_path: Path
    sidecar_path: Path
    disposition: str


class DirectorySink:
    """Filesystem-backed sink that quarantines rejected uploads."""

    def __init__(self, root_dir: Path) -> None:
        self._root_dir = root_dir
        self.last_stored: StoredUpload | None = None

    def persist(
        self,
        metadata: UploadMetadata,
        verdict: IngestVerdict,
        replay_source: ByteSource,
    ) -> None:
        """Stream replay bytes into the disposition directory.

        Raises:
            SieveSinkError: If the payload or sidecar cannot be written.
        """
        disposition = ACCEPTED_DIR_NAME if verdict.accepted else QUARANTINE_DIR_NAME
        target_dir = self._root_dir / disposition
        payload_path = target_dir / verdict.digest_hex
        sidecar_path = target_dir / f"{verdict.digest_hex}{VERDICT_SIDECAR_SUFFIX}"
        partial_path: Path | None = None
        stored = False
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            file_descriptor, raw_partial_path = tempfile.mkstemp(
                prefix=f".{verdict.digest_hex}-",
                suffix=PARTIAL_PAYLOAD_SUFFIX,
                dir=str(target_dir),
            )
            partial_path = Path(raw_partial_path)
            with os.fdopen(file_descriptor, "wb") as payload_file:
                for chunk in iter_chunks(replay_source):
                    payload_file.write(chunk)
            sidecar_path.write_text(
                json.dumps(build_sidecar_payload(metadata, verdict), indent=2, sort_keys=True)
                + "\n",
                encoding="utf-8",
            )
            # Final name appears only once the payload is complete.
            partial_path.replace(payload_path)
            stored = True
        except (OSError, SieveError) as error:
            raise SieveSinkError(
                f"Failed to store upload {metadata.filename} under {target_dir}: {error}. "
                "Check the output directory is writable and the replay source is readable."
            ) from error
        finally:
            if not stored and partial_path is not None:
                _discard_partial_payload(partial_path)
        self.last_stored = StoredUpload(
            payload_path=payload_path,
            sidecar_path=sidecar_path,
            disposition=disposition,
        )
        _LOGGER.info(
            "sink_persisted",
            filename=metadata.filename,
            digest=verdict.digest_hex,
            disposition=disposition,
            path=str(payload_path),
        )


def build_sidecar_payload(metadata: UploadMetadata, verdict: IngestVerdict) -> dict[str, object]:
    """Combine metadata and verdict into one JSON-safe payload.

    Args:
        metadata: Upload metadata.
        verdict: Validation verdict.

    Returns:
        Sidecar dictionary.
    """
    return {
        "filename": metadata.filename,
        "claimed_content_type": metadata.claimed_content_type,
        "declared_length": metadata.declared_length,
        "verdict": verdict.to_payload(),
    }


def _discard_partial_payload(partial_path: Path) -> None:
    try:
        partial_path.unlink(missing_ok=True)
    except OSError as error:
        _LOGGER.warning("partial_payload_cleanup_failed", path=str(partial_path), error=str(error))
