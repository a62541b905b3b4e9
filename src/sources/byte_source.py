"""Byte source capability shared by live and replay inputs.

A byte source yields non-empty chunks and then ``b""`` forever once the
stream ends. It is read once and released exactly once via ``close``.
"""

from __future__ import annotations

import io
from typing import Any, Iterator, Literal, Protocol

ByteSourceKind = Literal["stream", "replay"]


class ByteSource(Protocol):
    """Finite, read-once producer of byte chunks."""

    kind: ByteSourceKind

    def next_chunk(self) -> bytes: ...

    def close(self) -> None: ...


def iter_chunks(source: ByteSource) -> Iterator[bytes]:
    """Yield chunks from a source until its end-of-stream marker.

    Args:
        source: Byte source to drain.

    Yields:
        Non-empty byte chunks in arrival order.
    """
    while True:
        chunk = source.next_chunk()
        if not chunk:
            return
        yield chunk


class ByteSourceReader(io.RawIOBase):
    """Expose a byte source as a non-seekable binary file object.

    Lets file-oriented clients such as boto3 ``upload_fileobj`` consume
    a replay source without buffering it in memory.
    """

    def __init__(self, source: ByteSource) -> None:
        super().__init__()
        self._source = source
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, target: Any) -> int:
        if not self._pending:
            self._pending = self._source.next_chunk()
        if not self._pending:
            return 0
        size = min(len(target), len(self._pending))
        target[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size
