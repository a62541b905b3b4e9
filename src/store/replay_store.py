"""Transient replay buffer for single-pass ingestion.

This module owns the temporary file that an ingestion drains its input
into. The buffer is written once, then re-exposed exactly once as a
replay byte source that takes over the deletion obligation.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from core.constants import BUFFER_FILE_PREFIX, BUFFER_FILE_SUFFIX, DEFAULT_CHUNK_SIZE
from core.errors import SieveBufferError
from core.logging_config import get_logger
from sources.replay_source import ReplayByteSource, delete_buffer_file

_LOGGER = get_logger(__name__)


class ReplayBuffer:
    """Write-once temporary file scoped to one ingestion."""

    def __init__(self, buffer_dir: Path | None = None) -> None:
        try:
            file_descriptor, raw_path = tempfile.mkstemp(
                prefix=BUFFER_FILE_PREFIX,
                suffix=BUFFER_FILE_SUFFIX,
                dir=str(buffer_dir) if buffer_dir is not None else None,
            )
        except OSError as error:
            raise SieveBufferError(
                f"Failed to create replay buffer in {buffer_dir or tempfile.gettempdir()}: "
                f"{error}. Check the buffer directory exists and is writable."
            ) from error
        self._path = Path(raw_path)
        self._writer = os.fdopen(file_descriptor, "wb")
        self._bytes_written = 0
        self._handed_off = False
        self._released = False
        _LOGGER.debug("replay_buffer_created", path=str(self._path))

    @property
    def path(self) -> Path:
        """Location of the backing buffer file."""
        return self._path

    @property
    def bytes_written(self) -> int:
        """Number of bytes appended so far."""
        return self._bytes_written

    def append(self, chunk: bytes) -> None:
        """Append one chunk to the buffer.

        Raises:
            SieveBufferError: If the buffer is sealed or the write fails.
        """
        if self._writer.closed:
            raise SieveBufferError(
                f"Cannot append to replay buffer {self._path}: buffer is already sealed."
            )
        try:
            self._writer.write(chunk)
        except OSError as error:
            raise SieveBufferError(
                f"Failed to write replay buffer {self._path}: {error}. "
                "Check free space in the buffer directory."
            ) from error
        self._bytes_written += len(chunk)

    def open_replay_source(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ReplayByteSource:
        """Seal the buffer and hand it off as a self-deleting replay source.

        The returned source owns the file from here on; it can be opened
        only once per buffer.

        Raises:
            SieveBufferError: If the buffer was already handed off or released.
        """
        if self._handed_off or self._released:
            raise SieveBufferError(
                f"Replay buffer {self._path} was already handed off or released."
            )
        self._seal()
        replay_source = ReplayByteSource(self._path, delete_on_release=True, chunk_size=chunk_size)
        self._handed_off = True
        return replay_source

    def release(self) -> None:
        """Close the writer and delete the file unless a replay source owns it."""
        if self._released:
            return
        self._released = True
        try:
            self._writer.close()
        except OSError as error:
            _LOGGER.warning("replay_buffer_close_failed", path=str(self._path), error=str(error))
        if not self._handed_off:
            delete_buffer_file(self._path)

    def _seal(self) -> None:
        try:
            self._writer.flush()
            self._writer.close()
        except OSError as error:
            raise SieveBufferError(
                f"Failed to flush replay buffer {self._path}: {error}. "
                "Check free space in the buffer directory."
            ) from error

    def __enter__(self) -> "ReplayBuffer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
