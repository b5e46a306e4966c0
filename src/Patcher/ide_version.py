"""
ide_version.py
Read Antigravity's ideVersion from product.json and pick the sidebar layout.

Versions before 1.18.3 load the sidebar through
extensions/antigravity/cascade-panel.html (LEGACY); later versions embed it
in workbench/workbench.html (MODERN).  Anything we can't read or parse is
treated as LEGACY.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SidebarPatchVariant(Enum):
    LEGACY = "legacy"
    MODERN = "modern"


@dataclass(frozen=True, order=True)
class IdeVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: str) -> IdeVersion | None:
        """Parse 'MAJOR[.MINOR[.PATCH]]'; each part keeps only its leading digits.

        '1.18.3-beta' -> (1, 18, 3), '2' -> (2, 0, 0), 'v1.2' -> None.
        """
        parts = raw.strip().split(".")
        padded = (parts + ["0", "0"])[:3]
        values = [_leading_int(p) for p in padded]
        if any(v is None for v in values):
            return None
        return cls(*values)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


MODERN_SIDEBAR_THRESHOLD = IdeVersion(1, 18, 3)


@dataclass(frozen=True)
class VersionInfo:
    ide_version: str | None
    sidebar_variant: SidebarPatchVariant


def _leading_int(part: str) -> int | None:
    digits = ""
    for ch in part:
        if not ("0" <= ch <= "9"):
            break
        digits += ch
    return int(digits) if digits else None


def read_ide_version_string(resources_root: Path) -> str | None:
    """Return product.json's ideVersion string, or None if unavailable."""
    try:
        data = json.loads((resources_root / "product.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    value = data.get("ideVersion")
    return value if isinstance(value, str) else None


def read_ide_version(resources_root: Path) -> IdeVersion | None:
    raw = read_ide_version_string(resources_root)
    return IdeVersion.parse(raw) if raw is not None else None


def variant_for(version: IdeVersion | None) -> SidebarPatchVariant:
    if version is not None and version >= MODERN_SIDEBAR_THRESHOLD:
        return SidebarPatchVariant.MODERN
    return SidebarPatchVariant.LEGACY


def detect_sidebar_patch_variant(resources_root: Path) -> SidebarPatchVariant:
    return variant_for(read_ide_version(resources_root))


def detect_version_info(resources_root: Path) -> VersionInfo:
    raw = read_ide_version_string(resources_root)
    version = IdeVersion.parse(raw) if raw is not None else None
    return VersionInfo(ide_version=raw, sidebar_variant=variant_for(version))
