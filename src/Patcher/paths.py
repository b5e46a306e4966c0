"""
paths.py
Locate the Antigravity install root and the directories the patches touch.

Users may hand us the install root, the .app bundle, its Contents folder,
resources/ or resources/app — normalize_root() accepts any of these (or a
directory further down the tree) and climbs to the real root.
No UI, no filesystem writes.
"""

from __future__ import annotations

import sys
from pathlib import Path

_IS_MACOS = sys.platform == "darwin"

# Marker that proves a directory is an Antigravity install root
_MARKER = Path("extensions") / "antigravity" / "cascade-panel.html"

_WORKBENCH_SUBDIR = Path("out") / "vs" / "code" / "electron-browser" / "workbench"
_EXTENSION_SUBDIR = Path("extensions") / "antigravity"


def resources_app_root(root: Path) -> Path:
    """Return <root>/resources/app (macOS bundles use Resources/ when present)."""
    if _IS_MACOS:
        bundle_resources = root / "Resources"
        if bundle_resources.exists():
            return bundle_resources / "app"
    return root / "resources" / "app"


def extensions_dir(resources_root: Path) -> Path:
    return resources_root / _EXTENSION_SUBDIR


def workbench_dir(resources_root: Path) -> Path:
    return resources_root / _WORKBENCH_SUBDIR


def is_valid_root(root: Path) -> bool:
    return (resources_app_root(root) / _MARKER).exists()


def normalize_root(path: Path | str) -> Path | None:
    """Climb from *path* to the Antigravity root, or return None.

    Candidate seeds are tried in order: the path itself, <path>/Contents
    for an .app bundle, and the path with a trailing resources/app or
    resources stripped (case-insensitive).  Each seed and every ancestor
    of it is checked for the marker file.
    """
    if not str(path).strip():
        return None
    start = Path(path).expanduser().absolute()

    seeds: list[Path] = [start]
    if _is_app_bundle(start):
        seeds.append(start / "Contents")
    for tail in (("resources", "app"), ("resources",)):
        base = _strip_tail_ci(start, tail)
        if base is not None:
            seeds.append(base)

    for seed in seeds:
        for candidate in (seed, *seed.parents):
            if is_valid_root(candidate):
                return candidate
    return None


def _is_app_bundle(path: Path) -> bool:
    return path.name.lower().endswith(".app")


def _strip_tail_ci(path: Path, tail: tuple[str, ...]) -> Path | None:
    """Return *path* without its trailing *tail* components, or None if it doesn't end with them."""
    parts = path.parts
    if len(parts) <= len(tail):
        return None
    ending = [p.lower() for p in parts[-len(tail):]]
    if ending != [t.lower() for t in tail]:
        return None
    return Path(*parts[:-len(tail)])
