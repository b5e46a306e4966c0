"""
embedded.py
The patch asset bundle: every file the patcher can deploy.

Release builds read the copies shipped inside the package (Patcher/patches/).
With ANTI_POWER_DEV=1 the files are read live from a working checkout
instead, so edits to the patch sources take effect without reinstalling:
ANTI_POWER_PATCHES_DIR wins if set, otherwise the first patches/ (or
patcher/patches/) found walking up from the working directory.

Either way the result is the same list of (relative_path, content) pairs,
in PATCH_FILES order.
"""

from __future__ import annotations

import os
from pathlib import Path

from Patcher.errors import AssetBundleUnavailable

_BUNDLED_DIR = Path(__file__).resolve().parent / "patches"
_MAX_SEARCH_DEPTH = 6

PATCH_FILES: tuple[str, ...] = (
    "anti-power.sh",
    "anti-power.en.sh",
    # Sidebar, legacy layout (extensions/antigravity/)
    "cascade-panel.html",
    "cascade-panel/cascade-panel.js",
    "cascade-panel/extract.js",
    # Sidebar, modern layout (workbench/)
    "workbench.html",
    "sidebar-panel/sidebar-panel.js",
    "sidebar-panel/constants.js",
    "sidebar-panel/scan.js",
    "sidebar-panel/math.js",
    # Manager window (workbench/)
    "workbench-jetski-agent.html",
    "manager-panel/manager-panel.js",
    "manager-panel/mermaid.js",
    "manager-panel/math.js",
)


def is_dev_mode() -> bool:
    return os.environ.get("ANTI_POWER_DEV", "").strip().lower() in {"1", "true", "yes"}


def find_patches_dir() -> Path | None:
    """Return the on-disk patches directory used in development mode."""
    env_dir = os.environ.get("ANTI_POWER_PATCHES_DIR")
    if env_dir:
        cand = Path(env_dir).expanduser()
        return cand if cand.is_dir() else None

    directory = Path.cwd()
    for _ in range(_MAX_SEARCH_DEPTH):
        for cand in (directory / "patches", directory / "patcher" / "patches"):
            if cand.is_dir():
                return cand
        if directory.parent == directory:
            break
        directory = directory.parent
    return None


def _read_all(patches_dir: Path) -> list[tuple[str, str]]:
    files: list[tuple[str, str]] = []
    for rel in PATCH_FILES:
        full_path = patches_dir / rel
        try:
            content = full_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetBundleUnavailable(
                "patchBackend.errors.readPatchFileFailed",
                detail=f"{full_path}: {exc}",
            ) from exc
        files.append((rel, content))
    return files


def get_all_files() -> list[tuple[str, str]]:
    """Return every patch file as (relative_path, content)."""
    if is_dev_mode():
        patches_dir = find_patches_dir()
    else:
        patches_dir = _BUNDLED_DIR if _BUNDLED_DIR.is_dir() else None
    if patches_dir is None:
        raise AssetBundleUnavailable("patchBackend.errors.patchesDirNotFound")
    return _read_all(patches_dir)
