"""
deploy.py
Write one subsystem's patch files and its config.json into the install.

deploy_subsystem() always starts from a clean panel directory: the old one
is deleted and recreated before any file is written, so switching features
or Antigravity versions never leaves stale scripts behind.  A failed write
can only damage that subsystem's own panel directory; backups and the other
subsystems are untouched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from Patcher.backup import remove_tree
from Patcher.errors import FilesystemError
from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Patcher.subsystems import Subsystem


def select_files(subsystem: Subsystem,
                 files: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Keep only the bundle entries that belong to *subsystem*."""
    return [(rel, content) for rel, content in files if subsystem.owns(rel)]


def write_file(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.writeFileFailed", path, exc) from exc


def render_config(config: FeatureConfig | ManagerFeatureConfig) -> str:
    return json.dumps(config.to_config_json(), indent=2, ensure_ascii=False)


def write_config_file(path: Path, config: FeatureConfig | ManagerFeatureConfig) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(render_config(config).encode("utf-8"))
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.writeConfigFailed", path, exc) from exc


def deploy_subsystem(
    subsystem: Subsystem,
    resources_root: Path,
    config: FeatureConfig | ManagerFeatureConfig,
    files: Iterable[tuple[str, str]],
    log_fn=None,
) -> int:
    """Replace the subsystem's entry file and panel directory with the bundled copies.

    Returns the number of bundle files written (config.json not counted).
    """
    _log = log_fn or (lambda _: None)
    base = subsystem.base_dir(resources_root)
    panel = subsystem.panel_path(resources_root)

    remove_tree(panel, "patchBackend.errors.removeOldPanelDirFailed")
    try:
        panel.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.createPanelDirFailed", panel, exc) from exc

    written = 0
    for rel, content in select_files(subsystem, files):
        write_file(base / rel, content)
        written += 1

    write_config_file(subsystem.config_path(resources_root), config)
    _log(f"  Deployed {written} file(s) to {subsystem.panel_dir}/ ({subsystem.name})")
    return written
