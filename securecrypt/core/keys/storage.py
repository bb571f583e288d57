"""
Locked Key File Storage
=======================

Reads and writes key files under OS advisory locks.

Lock discipline:
    - Readers hold a shared lock (fcntl LOCK_SH); any number may read at once
    - Writers hold an exclusive lock (fcntl LOCK_EX); they exclude readers
      and other writers
    - Writers truncate only after the exclusive lock is held, so a
      cooperating reader never sees a half-written file

Failure policy:
    - Failing to open, lock, read or write raises KeyStorageError
    - Failing to unlock is logged as a warning and swallowed; by then the
      read or write has already completed (or already failed)

On Windows, msvcrt byte-range locks are used and both modes are exclusive.
"""

from __future__ import annotations

import logging
import os
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Final, Iterator, Optional

from securecrypt.core.errors import KeyStorageError
from securecrypt.utils.paths import ensure_private_dir

IS_WINDOWS: Final[bool] = platform.system() == "Windows"

if IS_WINDOWS:
    import msvcrt
else:
    import fcntl

KEY_FILE_MODE: Final[int] = 0o600

logger = logging.getLogger(__name__)


def _acquire(handle: BinaryIO, exclusive: bool) -> None:
    """Block until the lock is granted."""
    if IS_WINDOWS:
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)


def _release(handle: BinaryIO) -> None:
    if IS_WINDOWS:
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def file_lock(
    handle: BinaryIO,
    exclusive: bool,
    log: Optional[logging.Logger] = None,
) -> Iterator[BinaryIO]:
    """
    Hold an advisory lock on an open file for the duration of the block.

    Args:
        handle: Open binary file
        exclusive: True for a writer lock, False for a shared reader lock
        log: Logger receiving the unlock warning (module logger by default)

    Raises:
        KeyStorageError: If the lock cannot be acquired
    """
    log = log or logger
    try:
        _acquire(handle, exclusive)
    except OSError as exc:
        kind = "exclusive/writing" if exclusive else "shared/reading"
        raise KeyStorageError(f"Error while locking file ({kind})") from exc

    try:
        yield handle
    finally:
        try:
            _release(handle)
        except OSError:
            log.warning("Error while unlocking file %s", getattr(handle, "name", "<fd>"))


def read_key_file(
    path: Path,
    max_size: int,
    log: Optional[logging.Logger] = None,
) -> bytearray:
    """
    Read at most max_size bytes from a key file under a shared lock.

    The result is a bytearray so the caller can zero it once parsed.

    Raises:
        KeyStorageError: If the file cannot be opened, locked or read
    """
    try:
        handle = open(path, "rb", buffering=0)
    except OSError as exc:
        raise KeyStorageError(f"Error while opening key file {path}") from exc

    buffer = bytearray(max_size)
    with handle:
        with file_lock(handle, exclusive=False, log=log):
            try:
                size = handle.readinto(buffer)
            except OSError as exc:
                raise KeyStorageError("Error while reading key") from exc

    if not size:
        raise KeyStorageError(f"Key file {path} is empty")

    del buffer[size:]
    return buffer


def write_key_file(
    path: Path,
    payload: bytes | bytearray,
    log: Optional[logging.Logger] = None,
) -> None:
    """
    Replace the content of a key file under an exclusive lock.

    The parent directory is created owner-only when missing and the file
    itself is created with mode 0600.

    Raises:
        KeyStorageError: If the file cannot be created, locked or fully written
    """
    ensure_private_dir(path.parent)

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT, KEY_FILE_MODE)
    except OSError as exc:
        raise KeyStorageError(f"Error while opening key file {path}") from exc

    with open(fd, "wb", buffering=0) as handle:
        with file_lock(handle, exclusive=True, log=log):
            try:
                handle.seek(0)
                handle.truncate()
                written = handle.write(payload)
                os.fsync(handle.fileno())
            except OSError as exc:
                raise KeyStorageError("Error while writing key to file") from exc

            if written != len(payload):
                raise KeyStorageError("Error while writing key to file (short write)")
