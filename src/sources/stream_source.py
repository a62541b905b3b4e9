"""Byte source adapter over transport-level binary streams.

This module wraps any object exposing ``read(n)`` (open files, socket
files, HTTP bodies, stdin) as a read-once chunked byte source.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from core.constants import DEFAULT_CHUNK_SIZE
from core.errors import SieveConfigError, SieveSourceError
from core.logging_config import get_logger
from sources.byte_source import ByteSourceKind

_LOGGER = get_logger(__name__)


class StreamByteSource:
    """Chunked read-once view over a binary stream."""

    kind: ByteSourceKind = "stream"

    def __init__(
        self,
        stream: BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        close_stream: bool = True,
    ) -> None:
        if chunk_size <= 0:
            raise SieveConfigError(
                f"Invalid chunk size {chunk_size}: expected a positive integer. "
                "Pass chunk_size greater than zero."
            )
        self._stream = stream
        self._chunk_size = chunk_size
        self._close_stream = close_stream
        self._exhausted = False
        self._closed = False

    @classmethod
    def from_path(cls, path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "StreamByteSource":
        """Open a local file as a stream source.

        Args:
            path: File to read.
            chunk_size: Maximum bytes per chunk.

        Returns:
            Source that owns and closes the opened file.

        Raises:
            SieveSourceError: If the file cannot be opened.
        """
        try:
            stream = path.open("rb")
        except OSError as error:
            raise SieveSourceError(
                f"Failed to open source file {path}: {error}. "
                "Provide an existing readable file."
            ) from error
        return cls(stream, chunk_size=chunk_size)

    def next_chunk(self) -> bytes:
        """Return the next chunk, or ``b""`` once the stream has ended.

        Raises:
            SieveSourceError: If the source was released or the read fails.
        """
        if self._exhausted:
            return b""
        if self._closed:
            raise SieveSourceError(
                "Cannot read from a released stream source. "
                "Create a new source for each upload."
            )
        try:
            chunk = self._stream.read(self._chunk_size)
        except (OSError, ValueError) as error:
            raise SieveSourceError(
                f"Failed to read from input stream: {error}. "
                "The upload was aborted or the transport closed early."
            ) from error
        if not chunk:
            self._exhausted = True
            return b""
        return bytes(chunk)

    def close(self) -> None:
        """Release the source, closing the wrapped stream when owned."""
        if self._closed:
            return
        self._closed = True
        if self._close_stream:
            try:
                self._stream.close()
            except OSError as error:
                _LOGGER.warning("stream_source_close_failed", error=str(error))

    def __enter__(self) -> "StreamByteSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
