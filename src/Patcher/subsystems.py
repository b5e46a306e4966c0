"""
subsystems.py
The three independently patched areas of an Antigravity install.

Each subsystem owns one original entry file (replaced by our patched copy,
with the original kept as <entry>.bak) and one panel directory that holds
the patch scripts plus the rendered config.json.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from Patcher.paths import extensions_dir, workbench_dir

CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class Subsystem:
    name: str
    base: str          # "extensions" or "workbench"
    entry_file: str    # e.g. "cascade-panel.html"
    panel_dir: str     # e.g. "cascade-panel"
    uses_manager_config: bool = False

    def base_dir(self, resources_root: Path) -> Path:
        if self.base == "extensions":
            return extensions_dir(resources_root)
        return workbench_dir(resources_root)

    def entry_path(self, resources_root: Path) -> Path:
        return self.base_dir(resources_root) / self.entry_file

    def panel_path(self, resources_root: Path) -> Path:
        return self.base_dir(resources_root) / self.panel_dir

    def config_path(self, resources_root: Path) -> Path:
        return self.panel_path(resources_root) / CONFIG_FILENAME

    def owns(self, relative_path: str) -> bool:
        """True if a bundle file belongs to this subsystem."""
        return relative_path == self.entry_file or relative_path.startswith(self.panel_dir + "/")


LEGACY_SIDEBAR = Subsystem("legacy-sidebar", "extensions", "cascade-panel.html", "cascade-panel")
MODERN_SIDEBAR = Subsystem("modern-sidebar", "workbench", "workbench.html", "sidebar-panel")
MANAGER = Subsystem("manager", "workbench", "workbench-jetski-agent.html", "manager-panel",
                    uses_manager_config=True)

ALL_SUBSYSTEMS = (LEGACY_SIDEBAR, MODERN_SIDEBAR, MANAGER)
