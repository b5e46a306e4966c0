"""Shared fixtures: fake Antigravity installs and a recording platform."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from Patcher.platforms import PlatformSupport

ORIGINAL_CASCADE = "<html>original cascade</html>"
ORIGINAL_WORKBENCH = "<html>original workbench</html>"
ORIGINAL_MANAGER = "<html>original manager</html>"

CHECKSUMS = {
    "extensions/antigravity/cascade-panel.html": "aaa",
    "vs/code/electron-browser/workbench/workbench.html": "bbb",
    "vs/code/electron-browser/workbench/workbench-jetski-agent.html": "ccc",
    "vs/workbench/workbench.desktop.main.js": "ddd",
}


def make_install(base: Path, ide_version: str | None = "1.17.0",
                 with_workbench: bool = True) -> Path:
    """Create a minimal install under *base*; returns the install root."""
    root = base / "Antigravity"
    app = root / "resources" / "app"
    ext = app / "extensions" / "antigravity"
    ext.mkdir(parents=True)
    (ext / "cascade-panel.html").write_text(ORIGINAL_CASCADE, encoding="utf-8")
    if with_workbench:
        wb = app / "out" / "vs" / "code" / "electron-browser" / "workbench"
        wb.mkdir(parents=True)
        (wb / "workbench.html").write_text(ORIGINAL_WORKBENCH, encoding="utf-8")
        (wb / "workbench-jetski-agent.html").write_text(ORIGINAL_MANAGER, encoding="utf-8")
    product = {"nameShort": "Antigravity", "checksums": dict(CHECKSUMS)}
    if ide_version is not None:
        product["ideVersion"] = ide_version
    (app / "product.json").write_text(json.dumps(product, indent=2), encoding="utf-8")
    return root


def set_ide_version(root: Path, ide_version: str) -> None:
    product_json = root / "resources" / "app" / "product.json"
    data = json.loads(product_json.read_text(encoding="utf-8"))
    data["ideVersion"] = ide_version
    product_json.write_text(json.dumps(data), encoding="utf-8")


def snapshot(root: Path) -> dict[str, bytes]:
    """Every file under *root* with its content, keyed by relative path."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*")) if p.is_file()
    }


class FakePlatform(PlatformSupport):
    """Records elevation requests instead of running anything."""

    name = "fake"

    def __init__(self, system_owned: bool = False, supports_elevation: bool = True,
                 error=None, permission_hint_key: str | None = None):
        self.system_owned = system_owned
        self.supports_elevation = supports_elevation
        self.permission_hint_key = permission_hint_key
        self.error = error
        self.calls: list[dict] = []

    def candidate_paths(self) -> list[Path]:
        return []

    def requires_elevation(self, resources_root: Path) -> bool:
        return self.system_owned

    def run_privileged_script(self, script_path: Path, args: list[str],
                              status_path: Path) -> None:
        staging = script_path.parent
        self.calls.append({
            "script": script_path.name,
            "args": list(args),
            "staging": staging,
            "staged_files": sorted(str(p.relative_to(staging))
                                   for p in staging.rglob("*") if p.is_file()),
            "configs": {
                panel: json.loads((staging / panel / "config.json").read_text(encoding="utf-8"))
                for panel in ("cascade-panel", "sidebar-panel", "manager-panel")
                if (staging / panel / "config.json").exists()
            },
        })
        if self.error is not None:
            raise self.error


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep user config and dev-mode settings out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("ANTI_POWER_DEV", raising=False)
    monkeypatch.delenv("ANTI_POWER_PATCHES_DIR", raising=False)


@pytest.fixture
def install_root(tmp_path) -> Path:
    return make_install(tmp_path)


@pytest.fixture
def resources_root(install_root) -> Path:
    return install_root / "resources" / "app"


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()
