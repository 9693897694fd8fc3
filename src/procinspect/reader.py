"""Bounded reads of procfs pseudo-files."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 128


class ReadStatus(Enum):
    """Outcome of reading a pseudo-file."""

    OK = "ok"
    UNAVAILABLE = "unavailable"
    READ_FAILURE = "read_failure"


@dataclass(slots=True, frozen=True)
class Unavailable:
    """A pseudo-file that could not be opened (missing or denied)."""

    path: Path
    reason: str


@dataclass(slots=True, frozen=True)
class FileRead:
    """Text of a pseudo-file plus how the read went."""

    path: Path
    status: ReadStatus
    text: str = ""

    @property
    def ok(self) -> bool:
        """Check if the whole file was read."""
        return self.status is ReadStatus.OK


class PseudoFile:
    """
    Read-only handle on a pseudo-file.

    Use as a context manager so the descriptor is released on every exit
    path, including after a failed read.
    """

    def __init__(self, path: Path, fd: int) -> None:
        self._path = path
        self._fd: int | None = fd
        self._failed = False

    @property
    def path(self) -> Path:
        """Get the path this handle was opened on."""
        return self._path

    @property
    def closed(self) -> bool:
        """Check if the handle has been released."""
        return self._fd is None

    @property
    def failed(self) -> bool:
        """Check if a read on this handle has failed."""
        return self._failed

    def read(self, max_bytes: int = DEFAULT_CHUNK_SIZE) -> bytes | None:
        """
        Read the next chunk.

        Returns:
            Up to max_bytes bytes, b"" at end of file, or None if the read
            failed. A failed read marks the handle so close() reports it.
        """
        if self._fd is None:
            raise ValueError(f"read on closed pseudo-file {self._path}")
        try:
            return os.read(self._fd, max_bytes)
        except OSError as exc:
            self._failed = True
            logger.error("read %s: %s", self._path, exc.strerror or exc)
            return None

    def close(self) -> None:
        """Release the descriptor. Safe to call more than once."""
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        os.close(fd)
        if self._failed:
            logger.debug("closed %s after a failed read", self._path)

    def __enter__(self) -> "PseudoFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_pseudo_file(
    path: str | os.PathLike[str],
    missing_ok: bool = False,
) -> PseudoFile | Unavailable:
    """
    Open a pseudo-file for reading, or describe why it is unavailable.

    With missing_ok the failure is only logged at debug level, for files
    that may vanish with the task they belong to.
    """
    path = Path(path)
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        level = logging.DEBUG if missing_ok else logging.WARNING
        logger.log(level, "open %s: %s", path, reason)
        return Unavailable(path, reason)
    return PseudoFile(path, fd)


def read_pseudo_file(
    path: str | os.PathLike[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    missing_ok: bool = False,
) -> FileRead:
    """
    Read a pseudo-file to end of file.

    The file is read in chunk_size pieces into an accumulating buffer, so a
    label split across two chunks is still whole in the returned text. On a
    failed read the text gathered so far is kept.

    Args:
        path: File to read.
        chunk_size: Bytes requested per read call.
        missing_ok: Log an unavailable file at debug level only.

    Returns:
        A FileRead with the decoded text and a status.
    """
    handle = open_pseudo_file(path, missing_ok)
    if isinstance(handle, Unavailable):
        return FileRead(handle.path, ReadStatus.UNAVAILABLE)

    buffer = bytearray()
    with handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            buffer.extend(chunk)

    status = ReadStatus.READ_FAILURE if handle.failed else ReadStatus.OK
    text = buffer.decode("utf-8", errors="replace")
    return FileRead(handle.path, status, text)
