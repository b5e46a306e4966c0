"""
permissions.py
Decide up front whether the install can be written directly.

can_write_dir() really creates (and deletes) a probe file rather than
trusting mode bits: read-only mounts, macOS app translocation and root-owned
trees all show up the same way.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Iterable

from Patcher.errors import (
    ElevationError,
    FilesystemError,
    PatchError,
    PermissionDeniedError,
    PrivilegedScriptFailed,
)

_PROBE_NAME = ".anti-power-write-test"

_DENIED_ERRNOS = frozenset({errno.EACCES, errno.EPERM, errno.EROFS})

_PERMISSION_PHRASES = (
    "permission denied",
    "operation not permitted",
    "read-only file system",
)


def can_write_dir(directory: Path) -> bool:
    """Return False if *directory* refuses writes; raise FilesystemError on any other failure."""
    probe = directory / _PROBE_NAME
    try:
        fd = os.open(probe, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    except OSError as exc:
        if isinstance(exc, PermissionError) or exc.errno in _DENIED_ERRNOS:
            return False
        raise FilesystemError("patchBackend.errors.cannotWriteDir", directory, exc) from exc
    os.close(fd)
    try:
        probe.unlink()
    except OSError:
        pass
    return True


def first_unwritable_dir(dirs: Iterable[Path]) -> Path | None:
    """Return the first directory in *dirs* that can't be written, or None."""
    for directory in dirs:
        if not can_write_dir(directory):
            return directory
    return None


def is_permission_error(error: PatchError) -> bool:
    """True if *error* comes from the OS refusing access (triggers elevation).

    Failures of the elevated run itself never qualify, so a denied
    escalation is not escalated again; neither does PermissionDeniedError,
    which is only raised where no elevation path exists.
    """
    if isinstance(error, (PrivilegedScriptFailed, ElevationError, PermissionDeniedError)):
        return False
    if isinstance(error, FilesystemError) and error.is_permission_related:
        return True
    lower = error.details_for_match().lower()
    return any(phrase in lower for phrase in _PERMISSION_PHRASES)
