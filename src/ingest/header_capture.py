"""Fixed-capacity capture of a stream's leading bytes."""

from __future__ import annotations

from core.constants import HEADER_CAPTURE_LIMIT


class HeaderCapture:
    """Collect the first ``capacity`` bytes of a chunk sequence.

    The buffer is allocated once; chunks stop being copied as soon as it
    is full.
    """

    def __init__(self, capacity: int = HEADER_CAPTURE_LIMIT) -> None:
        self._buffer = bytearray(capacity)
        self._filled = 0

    @property
    def is_full(self) -> bool:
        return self._filled == len(self._buffer)

    def feed(self, chunk: bytes) -> None:
        """Copy as much of ``chunk`` as still fits."""
        if self.is_full:
            return
        take = min(len(chunk), len(self._buffer) - self._filled)
        self._buffer[self._filled : self._filled + take] = chunk[:take]
        self._filled += take

    def header(self) -> bytes:
        """Return the captured prefix."""
        return bytes(self._buffer[: self._filled])
