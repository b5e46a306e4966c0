"""
backup.py
Keep and restore the original entry files the patches replace.

The backup of <file> is its sibling <file>.bak.  A backup is only ever
created when none exists yet, so re-installing never overwrites the real
original with an already patched copy.  Restoring copies the .bak back,
deletes it and removes the subsystem's panel directory.

The .bak files are the only durable state: uninstall works after any number
of restarts, and across Antigravity upgrades that switch the sidebar layout,
because restore_all() always visits every subsystem.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from Patcher.errors import FilesystemError
from Patcher.subsystems import ALL_SUBSYSTEMS, Subsystem

BACKUP_SUFFIX = ".bak"


def backup_path(original: Path) -> Path:
    return original.with_name(original.name + BACKUP_SUFFIX)


def backup_file(original: Path) -> bool:
    """Copy *original* to <original>.bak unless it is missing or already backed up.

    Returns True if a backup was written.
    """
    bak = backup_path(original)
    if not original.exists() or bak.exists():
        return False
    try:
        shutil.copy2(original, bak)
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.backupFailed", bak, exc) from exc
    return True


def restore_file(original: Path) -> bool:
    """Copy <original>.bak back over *original* and delete the backup.

    Returns True if something was restored.
    """
    bak = backup_path(original)
    if not bak.exists():
        return False
    try:
        shutil.copy2(bak, original)
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.restoreFailed", original, exc) from exc
    try:
        bak.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.removeBackupFailed", bak, exc) from exc
    return True


def remove_tree(directory: Path, key: str = "patchBackend.errors.removeDirFailed") -> bool:
    if not directory.exists():
        return False
    try:
        shutil.rmtree(directory)
    except OSError as exc:
        raise FilesystemError(key, directory, exc) from exc
    return True


def backup_subsystem(subsystem: Subsystem, resources_root: Path, log_fn=None) -> None:
    _log = log_fn or (lambda _: None)
    entry = subsystem.entry_path(resources_root)
    if backup_file(entry):
        _log(f"  Backed up {entry.name} -> {entry.name}{BACKUP_SUFFIX}")
    elif backup_path(entry).exists():
        _log(f"  Backup of {entry.name} already exists — keeping original.")


def restore_subsystem(subsystem: Subsystem, resources_root: Path, log_fn=None) -> None:
    """Put the subsystem's original entry file back and drop its panel directory."""
    _log = log_fn or (lambda _: None)
    entry = subsystem.entry_path(resources_root)
    if restore_file(entry):
        _log(f"  Restored {entry.name}")
    if remove_tree(subsystem.panel_path(resources_root)):
        _log(f"  Removed {subsystem.panel_dir}/")


def restore_all(resources_root: Path, log_fn=None) -> None:
    """Restore every subsystem regardless of which layout is currently active."""
    for subsystem in ALL_SUBSYSTEMS:
        restore_subsystem(subsystem, resources_root, log_fn=log_fn)
