"""Single-pass ingestion engine.

This module drains a read-once byte source into a transient replay
buffer while computing digest, size, and detected content type in the
same pass. It then validates the upload, replays the buffered bytes to
a sink, and removes the buffer on every exit path.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.constants import DEFAULT_CHUNK_SIZE, HASH_ALGORITHM
from core.errors import SieveDependencyError
from core.logging_config import get_logger
from core.types import IngestVerdict, UploadMetadata, ValidationConfig
from ingest.content_detector import detect_content_type
from ingest.header_capture import HeaderCapture
from ingest.validation import collect_validation_errors
from sinks.sink import IngestSink
from sources.byte_source import ByteSource, iter_chunks
from store.replay_store import ReplayBuffer

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class DrainMeasurements:
    """Properties derived while draining one source.

    Attributes:
        observed_length: Total bytes drained.
        digest_hex: Lowercase hex digest over all drained bytes.
        detected_content_type: Content type of the captured header.
    """

    observed_length: int
    digest_hex: str
    detected_content_type: str


class Ingestor:
    """Stateless, reentrant ingestion engine.

    Constructor arguments fix immutable collaborators only; every call
    to ``ingest`` receives its own metadata, limits, source, and sink.
    """

    def __init__(
        self,
        buffer_dir: Path | None = None,
        hash_algorithm: str = HASH_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._buffer_dir = buffer_dir
        self._hash_algorithm = hash_algorithm
        self._chunk_size = chunk_size

    def ingest(
        self,
        metadata: UploadMetadata,
        config: ValidationConfig,
        source: ByteSource,
        sink: IngestSink,
    ) -> IngestVerdict:
        """Validate one upload and hand it to the sink.

        The input source is drained exactly once and is not closed here;
        the caller owns its release.

        Args:
            metadata: Caller-supplied upload metadata.
            config: Validation limits.
            source: Read-once input source.
            sink: Downstream consumer of verdict and replay bytes.

        Returns:
            The verdict passed to the sink.

        Raises:
            SieveDependencyError: If the digest algorithm is unavailable.
            SieveSourceError: If reading the input source fails.
            SieveBufferError: If the replay buffer cannot be created or used.
        """
        _LOGGER.info("ingest_started", filename=metadata.filename, source_kind=source.kind)
        buffer = ReplayBuffer(self._buffer_dir)
        try:
            measurements = drain_source(source, buffer, self._hash_algorithm)
            errors = collect_validation_errors(
                metadata,
                config,
                measurements.observed_length,
                measurements.detected_content_type,
            )
            verdict = IngestVerdict.from_measurements(
                detected_content_type=measurements.detected_content_type,
                observed_length=measurements.observed_length,
                digest_hex=measurements.digest_hex,
                errors=errors,
            )
            self._persist(metadata, verdict, buffer, sink)
        except Exception as error:
            _LOGGER.error(
                "ingest_failed",
                filename=metadata.filename,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise
        finally:
            buffer.release()
        _log_ingest_completion(metadata, verdict)
        return verdict

    def _persist(
        self,
        metadata: UploadMetadata,
        verdict: IngestVerdict,
        buffer: ReplayBuffer,
        sink: IngestSink,
    ) -> None:
        replay_source = buffer.open_replay_source(self._chunk_size)
        try:
            sink.persist(metadata, verdict, replay_source)
        except Exception as error:
            _LOGGER.error(
                "sink_persist_failed",
                filename=metadata.filename,
                digest=verdict.digest_hex,
                error=str(error),
            )
            raise
        finally:
            replay_source.close()


def drain_source(
    source: ByteSource,
    buffer: ReplayBuffer,
    hash_algorithm: str,
) -> DrainMeasurements:
    """Drain a source into a buffer, measuring it along the way.

    Every chunk updates header capture, digest, buffer, and length in
    arrival order. The loop never stops early on size.

    Args:
        source: Read-once input source.
        buffer: Replay buffer receiving every byte.
        hash_algorithm: Name of the ``hashlib`` digest to compute.

    Returns:
        Length, digest, and detected content type.

    Raises:
        SieveDependencyError: If the digest algorithm is unavailable.
    """
    digest = _new_digest(hash_algorithm)
    header = HeaderCapture()
    total_bytes = 0
    for chunk in iter_chunks(source):
        header.feed(chunk)
        digest.update(chunk)
        buffer.append(chunk)
        total_bytes += len(chunk)
    return DrainMeasurements(
        observed_length=total_bytes,
        digest_hex=digest.hexdigest(),
        detected_content_type=detect_content_type(header.header()),
    )


def _new_digest(hash_algorithm: str) -> Any:
    try:
        digest = hashlib.new(hash_algorithm)
    except ValueError as error:
        raise SieveDependencyError(
            f"Digest algorithm '{hash_algorithm}' is not available: {error}. "
            f"Use one of: {', '.join(sorted(hashlib.algorithms_available))}."
        ) from error
    if digest.digest_size == 0:
        raise SieveDependencyError(
            f"Digest algorithm '{hash_algorithm}' has no fixed digest length. "
            "Use a fixed-length algorithm such as sha256."
        )
    return digest


def _log_ingest_completion(metadata: UploadMetadata, verdict: IngestVerdict) -> None:
    _LOGGER.info(
        "ingest_completed",
        filename=metadata.filename,
        digest=verdict.digest_hex,
        observed_length=verdict.observed_length,
        detected_content_type=verdict.detected_content_type,
        accepted=verdict.accepted,
        error_count=len(verdict.errors),
    )
