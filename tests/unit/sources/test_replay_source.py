"""Unit tests for the buffered replay byte source."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.errors import SieveBufferError
from sources.byte_source import ByteSourceReader, iter_chunks
from sources.replay_source import ReplayByteSource


def _buffer_file(tmp_path: Path, payload: bytes) -> Path:
    file_path = tmp_path / "ingest-test.tmp"
    file_path.write_bytes(payload)
    return file_path


def test_replay_source_reads_buffered_bytes(tmp_path: Path) -> None:
    """Replay should yield the file contents in order."""
    file_path = _buffer_file(tmp_path, b"x" * 20000)

    with ReplayByteSource(file_path, delete_on_release=False) as source:
        chunks = list(iter_chunks(source))

    assert [len(chunk) for chunk in chunks] == [8192, 8192, 3616]
    assert source.kind == "replay"


def test_replay_source_deletes_file_on_release(tmp_path: Path) -> None:
    """delete_on_release should remove the backing file exactly on close."""
    file_path = _buffer_file(tmp_path, b"payload")
    source = ReplayByteSource(file_path, delete_on_release=True)

    source.close()
    source.close()

    assert file_path.exists() is False


def test_replay_source_keeps_file_without_delete_flag(tmp_path: Path) -> None:
    """Without delete_on_release the file should survive release."""
    file_path = _buffer_file(tmp_path, b"payload")

    ReplayByteSource(file_path, delete_on_release=False).close()

    assert file_path.exists() is True


def test_replay_source_read_after_release_raises(tmp_path: Path) -> None:
    """Reading a released replay source should fail."""
    source = ReplayByteSource(_buffer_file(tmp_path, b"payload"), delete_on_release=True)
    source.close()

    with pytest.raises(SieveBufferError):
        source.next_chunk()

    assert True


def test_replay_source_missing_file_raises(tmp_path: Path) -> None:
    """Opening a missing buffer should raise a buffer error."""
    with pytest.raises(SieveBufferError):
        ReplayByteSource(tmp_path / "gone.tmp", delete_on_release=True)

    assert True


def test_byte_source_reader_exposes_file_object(tmp_path: Path) -> None:
    """ByteSourceReader should let file APIs consume a source."""
    payload = bytes(range(256)) * 100
    source = ReplayByteSource(_buffer_file(tmp_path, payload), delete_on_release=True)

    reader = io.BufferedReader(ByteSourceReader(source))
    first = reader.read(10)
    rest = reader.read()
    source.close()

    assert first + rest == payload
