"""Deploying one subsystem's files and config.json."""

from __future__ import annotations

import json

from Patcher import embedded
from Patcher.deploy import deploy_subsystem, render_config, select_files
from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Patcher.subsystems import LEGACY_SIDEBAR, MANAGER, MODERN_SIDEBAR

FILES = [
    ("anti-power.sh", "#!/bin/bash"),
    ("cascade-panel.html", "<html>patched cascade</html>"),
    ("cascade-panel/cascade-panel.js", "// cascade"),
    ("workbench.html", "<html>patched workbench</html>"),
    ("sidebar-panel/sidebar-panel.js", "// sidebar"),
    ("workbench-jetski-agent.html", "<html>patched manager</html>"),
    ("manager-panel/manager-panel.js", "// manager"),
]


def test_select_files_by_subsystem():
    assert [rel for rel, _ in select_files(MODERN_SIDEBAR, FILES)] == [
        "workbench.html", "sidebar-panel/sidebar-panel.js"]
    assert [rel for rel, _ in select_files(MANAGER, FILES)] == [
        "workbench-jetski-agent.html", "manager-panel/manager-panel.js"]


def test_select_files_does_not_match_prefix_lookalikes():
    files = [("cascade-panel-extra/x.js", ""), ("cascade-panel.html.orig", "")]
    assert select_files(LEGACY_SIDEBAR, files) == []


def test_deploy_writes_entry_panel_and_config(resources_root):
    config = FeatureConfig(font_size=18.0)
    written = deploy_subsystem(LEGACY_SIDEBAR, resources_root, config, FILES)

    assert written == 2
    base = LEGACY_SIDEBAR.base_dir(resources_root)
    assert (base / "cascade-panel.html").read_text(encoding="utf-8") == "<html>patched cascade</html>"
    assert (base / "cascade-panel" / "cascade-panel.js").read_text(encoding="utf-8") == "// cascade"
    data = json.loads(LEGACY_SIDEBAR.config_path(resources_root).read_text(encoding="utf-8"))
    assert data["fontSize"] == 18.0
    assert "enabled" not in data


def test_deploy_clears_stale_panel_files(resources_root):
    panel = MANAGER.panel_path(resources_root)
    panel.mkdir()
    (panel / "old-script.js").write_text("stale", encoding="utf-8")

    deploy_subsystem(MANAGER, resources_root, ManagerFeatureConfig(), FILES)

    assert not (panel / "old-script.js").exists()
    assert (panel / "manager-panel.js").exists()
    assert (panel / "config.json").exists()


def test_rendered_config_is_pretty_utf8():
    rendered = render_config(FeatureConfig(copy_button_custom_text="复制"))
    assert "复制" in rendered
    assert rendered.startswith("{\n  ")


def test_bundled_assets_cover_every_subsystem():
    files = embedded.get_all_files()
    for subsystem in (LEGACY_SIDEBAR, MODERN_SIDEBAR, MANAGER):
        owned = [rel for rel, _ in select_files(subsystem, files)]
        assert subsystem.entry_file in owned
        assert any(rel.startswith(subsystem.panel_dir + "/") for rel in owned)
