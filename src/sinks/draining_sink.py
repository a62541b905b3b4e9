"""Sink that reads the replay stream to completion and discards it.

Used by the CLI ``check`` command and as a test double: it records the
last metadata and verdict and how many replay bytes it consumed.
"""

from __future__ import annotations

from core.types import IngestVerdict, UploadMetadata
from sources.byte_source import ByteSource, iter_chunks


class DrainingSink:
    """Count replayed bytes without storing them."""

    def __init__(self) -> None:
        self.bytes_consumed = 0
        self.last_metadata: UploadMetadata | None = None
        self.last_verdict: IngestVerdict | None = None

    def persist(
        self,
        metadata: UploadMetadata,
        verdict: IngestVerdict,
        replay_source: ByteSource,
    ) -> None:
        """Record the verdict and drain the replay source."""
        self.last_metadata = metadata
        self.last_verdict = verdict
        self.bytes_consumed = sum(len(chunk) for chunk in iter_chunks(replay_source))
