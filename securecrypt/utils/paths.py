"""
Path Utilities
==============

OS-aware helpers for the directories that hold key files.
"""

from __future__ import annotations

import platform
import stat
from pathlib import Path

from securecrypt.core.errors import KeyStorageError


def ensure_private_dir(directory: Path) -> Path:
    """
    Create a directory (and parents) readable only by its owner.

    Existing directories are left as they are; only newly created ones
    get owner-only permissions.

    Args:
        directory: Directory to create

    Returns:
        The directory path

    Raises:
        KeyStorageError: If the directory cannot be created
    """
    if directory.is_dir():
        return directory

    try:
        directory.mkdir(mode=stat.S_IRWXU, parents=True, exist_ok=True)
        # mkdir's mode is filtered through the umask
        if platform.system().lower() != "windows":
            directory.chmod(stat.S_IRWXU)  # 700 - owner only
    except OSError as exc:
        raise KeyStorageError(f'Directory "{directory}" was not created') from exc

    if not directory.is_dir():
        raise KeyStorageError(f'Directory "{directory}" was not created')

    return directory
