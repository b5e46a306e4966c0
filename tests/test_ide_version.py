"""ideVersion parsing and sidebar layout selection."""

from __future__ import annotations

import json

import pytest

from Patcher.ide_version import (
    IdeVersion,
    SidebarPatchVariant,
    detect_sidebar_patch_variant,
    detect_version_info,
    read_ide_version,
)


@pytest.mark.parametrize("raw, expected", [
    ("1.18.3", IdeVersion(1, 18, 3)),
    ("1.18.3-beta", IdeVersion(1, 18, 3)),
    ("1.18", IdeVersion(1, 18, 0)),
    ("2", IdeVersion(2, 0, 0)),
    (" 1.20.0 ", IdeVersion(1, 20, 0)),
    ("1.18.3.7", IdeVersion(1, 18, 3)),
])
def test_parse(raw, expected):
    assert IdeVersion.parse(raw) == expected


@pytest.mark.parametrize("raw", ["", "v1.2", "1..3", "abc", "1.x.0"])
def test_parse_rejects(raw):
    assert IdeVersion.parse(raw) is None


def test_ordering():
    assert IdeVersion(1, 18, 3) > IdeVersion(1, 18, 2)
    assert IdeVersion(1, 19, 0) > IdeVersion(1, 18, 99)
    assert IdeVersion(2, 0, 0) > IdeVersion(1, 99, 99)
    assert str(IdeVersion(1, 2, 3)) == "1.2.3"


def _write_product(resources_root, payload):
    (resources_root / "product.json").write_text(json.dumps(payload), encoding="utf-8")


@pytest.mark.parametrize("version, variant", [
    ("1.18.2", SidebarPatchVariant.LEGACY),
    ("1.18.3", SidebarPatchVariant.MODERN),
    ("1.18.3-beta", SidebarPatchVariant.MODERN),
    ("1.19.0", SidebarPatchVariant.MODERN),
    ("2", SidebarPatchVariant.MODERN),
    ("1.9.99", SidebarPatchVariant.LEGACY),
    ("garbage", SidebarPatchVariant.LEGACY),
])
def test_variant_threshold(resources_root, version, variant):
    _write_product(resources_root, {"ideVersion": version})
    assert detect_sidebar_patch_variant(resources_root) is variant


def test_missing_product_json_is_legacy(resources_root):
    (resources_root / "product.json").unlink()
    assert read_ide_version(resources_root) is None
    assert detect_sidebar_patch_variant(resources_root) is SidebarPatchVariant.LEGACY


def test_non_string_version_is_legacy(resources_root):
    _write_product(resources_root, {"ideVersion": 1.19})
    assert detect_sidebar_patch_variant(resources_root) is SidebarPatchVariant.LEGACY


def test_corrupt_product_json_is_legacy(resources_root):
    (resources_root / "product.json").write_text("{not json", encoding="utf-8")
    assert detect_sidebar_patch_variant(resources_root) is SidebarPatchVariant.LEGACY


def test_version_info_keeps_raw_string(resources_root):
    _write_product(resources_root, {"ideVersion": "1.18.3-beta"})
    info = detect_version_info(resources_root)
    assert info.ide_version == "1.18.3-beta"
    assert info.sidebar_variant is SidebarPatchVariant.MODERN
