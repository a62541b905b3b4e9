"""Unit tests for the transport stream byte source."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.errors import SieveConfigError, SieveSourceError
from sources.byte_source import iter_chunks
from sources.stream_source import StreamByteSource


def test_next_chunk_respects_chunk_size() -> None:
    """Chunks should be at most chunk_size bytes and end with b''."""
    source = StreamByteSource(io.BytesIO(b"abcdefgh"), chunk_size=3)

    chunks = [source.next_chunk() for _ in range(4)]

    assert chunks == [b"abc", b"def", b"gh", b""]


def test_next_chunk_keeps_returning_end_marker_after_exhaustion() -> None:
    """An exhausted source should not restart."""
    source = StreamByteSource(io.BytesIO(b"ab"))
    list(iter_chunks(source))

    assert source.next_chunk() == b""
    assert source.next_chunk() == b""


def test_close_is_idempotent_and_closes_stream() -> None:
    """Releasing twice should be safe and close the owned stream."""
    stream = io.BytesIO(b"abc")
    source = StreamByteSource(stream)
    list(iter_chunks(source))

    source.close()
    source.close()

    assert stream.closed is True


def test_close_leaves_borrowed_stream_open() -> None:
    """Sources created with close_stream=False should not close the stream."""
    stream = io.BytesIO(b"abc")

    with StreamByteSource(stream, close_stream=False) as source:
        source.next_chunk()

    assert stream.closed is False


def test_next_chunk_after_release_raises() -> None:
    """Reading a released, unexhausted source should fail."""
    source = StreamByteSource(io.BytesIO(b"abc"))
    source.close()

    with pytest.raises(SieveSourceError):
        source.next_chunk()

    assert True


def test_next_chunk_wraps_transport_failures() -> None:
    """Underlying read errors should surface as source errors."""

    class _BrokenStream(io.RawIOBase):
        def readable(self) -> bool:
            return True

        def read(self, size: int = -1) -> bytes:
            raise ConnectionResetError("peer reset")

    source = StreamByteSource(_BrokenStream())

    with pytest.raises(SieveSourceError, match="peer reset"):
        source.next_chunk()

    assert True


def test_invalid_chunk_size_raises() -> None:
    """Non-positive chunk sizes should be rejected."""
    with pytest.raises(SieveConfigError):
        StreamByteSource(io.BytesIO(b""), chunk_size=0)

    assert True


def test_from_path_reads_file(tmp_path: Path) -> None:
    """from_path should open and stream a local file."""
    file_path = tmp_path / "upload.bin"
    file_path.write_bytes(b"0123456789")

    with StreamByteSource.from_path(file_path, chunk_size=4) as source:
        payload = b"".join(iter_chunks(source))

    assert payload == b"0123456789"
    assert source.kind == "stream"


def test_from_path_missing_file_raises(tmp_path: Path) -> None:
    """Missing files should raise a source error."""
    with pytest.raises(SieveSourceError):
        StreamByteSource.from_path(tmp_path / "missing.bin")

    assert True


class _FailingCloseStream:
    """Stream stub whose close reports a transport error."""

    def read(self, size: int) -> bytes:
        return b""

    def close(self) -> None:
        raise OSError("connection reset")


def test_close_logs_stream_close_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Errors from the wrapped stream's close should be logged, not raised."""
    source = StreamByteSource(_FailingCloseStream())

    source.close()
    source.close()

    assert "stream_source_close_failed" in caplog.text
    with pytest.raises(SieveSourceError):
        source.next_chunk()
