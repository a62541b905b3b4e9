"""Byte source that replays a buffered file.

The replay store hands one of these to the sink. When created with
``delete_on_release`` the source owns the backing file and removes it
on ``close``.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import DEFAULT_CHUNK_SIZE
from core.errors import SieveBufferError
from core.logging_config import get_logger
from sources.byte_source import ByteSourceKind

_LOGGER = get_logger(__name__)


class ReplayByteSource:
    """Read-once chunked view over a previously buffered file."""

    kind: ByteSourceKind = "replay"

    def __init__(
        self,
        path: Path,
        delete_on_release: bool,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._path = path
        self._delete_on_release = delete_on_release
        self._chunk_size = chunk_size
        self._exhausted = False
        self._closed = False
        try:
            self._handle = path.open("rb")
        except OSError as error:
            raise SieveBufferError(
                f"Failed to open replay buffer {path}: {error}. "
                "Check temporary directory permissions and free space."
            ) from error

    @property
    def path(self) -> Path:
        """Location of the backing buffer file."""
        return self._path

    def next_chunk(self) -> bytes:
        """Return the next buffered chunk, or ``b""`` at end of buffer.

        Raises:
            SieveBufferError: If the buffer was released or cannot be read.
        """
        if self._exhausted:
            return b""
        if self._closed:
            raise SieveBufferError(
                f"Cannot read replay buffer {self._path} after release. "
                "Consume the replay source inside the sink call."
            )
        try:
            chunk = self._handle.read(self._chunk_size)
        except OSError as error:
            raise SieveBufferError(
                f"Failed to read replay buffer {self._path}: {error}."
            ) from error
        if not chunk:
            self._exhausted = True
            return b""
        return chunk

    def close(self) -> None:
        """Close the buffer handle and delete the file when owned."""
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.close()
        except OSError as error:
            _LOGGER.warning("replay_source_close_failed", path=str(self._path), error=str(error))
        if self._delete_on_release:
            delete_buffer_file(self._path)

    def __enter__(self) -> "ReplayByteSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def delete_buffer_file(path: Path) -> bool:
    """Delete a buffer file, logging instead of raising on failure.

    Args:
        path: Buffer file to remove.

    Returns:
        True when the file is gone afterwards.
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as error:
        _LOGGER.warning("replay_buffer_cleanup_failed", path=str(path), error=str(error))
        return False
    return True
