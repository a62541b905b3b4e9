"""Sink capability consumed by the ingest engine."""

from __future__ import annotations

from typing import Protocol

from core.types import IngestVerdict, UploadMetadata
from sources.byte_source import ByteSource


class IngestSink(Protocol):
    """Downstream consumer deciding the final disposition of an upload.

    The sink borrows ``replay_source`` for the duration of the call; it
    may read it fully, partially, or not at all. The engine releases the
    source afterwards.
    """

    def persist(
        self,
        metadata: UploadMetadata,
        verdict: IngestVerdict,
        replay_source: ByteSource,
    ) -> None: ...
