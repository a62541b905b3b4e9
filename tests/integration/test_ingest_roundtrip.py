"""Integration tests for end-to-end ingestion into a directory sink."""

from __future__ import annotations

import hashlib
import random
from pathlib import Path

from core.constants import DEFAULT_MAX_CONTENT_LENGTH
from core.types import UploadMetadata
from ingest.engine import Ingestor
from ingest.validation import build_validation_config
from sinks.directory_sink import DirectorySink
from sources.stream_source import StreamByteSource


def _write_pdf(path: Path, size_bytes: int, seed: int) -> bytes:
    payload = b"%PDF-1.7\n" + random.Random(seed).randbytes(size_bytes - 9)
    path.write_bytes(payload)
    return payload


def test_large_pdf_is_stored_byte_for_byte(tmp_path: Path) -> None:
    """A multi-megabyte PDF should be accepted and stored unchanged."""
    payload = _write_pdf(tmp_path / "report.pdf", 5 * 1024 * 1024, seed=7)
    buffer_dir = tmp_path / "buffers"
    buffer_dir.mkdir()
    sink = DirectorySink(tmp_path / "stored")
    config = build_validation_config(DEFAULT_MAX_CONTENT_LENGTH, ["application/pdf"])
    metadata = UploadMetadata("report.pdf", "application/pdf", declared_length=len(payload))

    with StreamByteSource.from_path(tmp_path / "report.pdf") as source:
        verdict = Ingestor(buffer_dir=buffer_dir).ingest(metadata, config, source, sink)

    assert verdict.accepted is True
    assert verdict.digest_hex == hashlib.sha256(payload).hexdigest()
    assert sink.last_stored is not None
    assert sink.last_stored.payload_path.read_bytes() == payload
    assert list(buffer_dir.iterdir()) == []


def test_oversized_pdf_is_quarantined_with_full_length(tmp_path: Path) -> None:
    """Uploads above the ceiling should be measured in full and quarantined."""
    payload = _write_pdf(tmp_path / "huge.pdf", 15 * 1024 * 1024, seed=11)
    buffer_dir = tmp_path / "buffers"
    buffer_dir.mkdir()
    sink = DirectorySink(tmp_path / "stored")
    config = build_validation_config(DEFAULT_MAX_CONTENT_LENGTH, ["application/pdf"])
    metadata = UploadMetadata("huge.pdf", "application/pdf")

    with StreamByteSource.from_path(tmp_path / "huge.pdf", chunk_size=64 * 1024) as source:
        verdict = Ingestor(buffer_dir=buffer_dir).ingest(metadata, config, source, sink)

    assert verdict.accepted is False
    assert verdict.observed_length == len(payload)
    assert verdict.errors == (
        f"File size {len(payload)} bytes exceeds maximum allowed "
        f"{DEFAULT_MAX_CONTENT_LENGTH} bytes",
    )
    assert sink.last_stored is not None
    assert sink.last_stored.disposition == "quarantine"
    assert sink.last_stored.payload_path.stat().st_size == len(payload)
    assert list(buffer_dir.iterdir()) == []
