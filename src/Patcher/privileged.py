"""
privileged.py
Replay a patch operation with root rights through the bundled helper script.

Used when the install can't be written by the current user (system-owned
location, failed write probe, or a write that hit EACCES part-way).

Steps:
  1. stage   — copy the whole asset bundle into a fresh temp directory
  2. render  — write the config.json files the helper will copy
  3. locate  — pick anti-power.sh / anti-power.en.sh by locale
  4. chmod   — make it executable
  5. invoke  — hand it to the platform's elevation mechanism
  6. cleanup — the temp directory is removed on every exit path
"""

from __future__ import annotations

import os
import shutil
import tempfile
import uuid
from enum import Enum
from pathlib import Path

from Patcher import embedded
from Patcher.deploy import write_config_file, write_file
from Patcher.errors import (
    FilesystemError,
    MissingFeatureConfig,
    PatchError,
    PrivilegedScriptFailed,
    ScriptMissing,
)
from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Patcher.platforms import PlatformSupport
from Patcher.subsystems import CONFIG_FILENAME, LEGACY_SIDEBAR, MANAGER, MODERN_SIDEBAR
from Utils.i18n import is_zh_locale

_STAGING_PREFIX = "anti-power-privileged"
_MAX_STAGING_ATTEMPTS = 8
_STATUS_FILENAME = "privileged-status.txt"


class PatchMode(Enum):
    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPDATE_CONFIG = "update-config"

    @property
    def carries_config(self) -> bool:
        return self is not PatchMode.UNINSTALL


class StagingDir:
    """Exclusively owned temp directory, deleted when the with-block exits."""

    def __init__(self, base: Path | None = None):
        self._base = Path(base) if base is not None else Path(tempfile.gettempdir())
        self.path: Path | None = None

    def __enter__(self) -> Path:
        for attempt in range(_MAX_STAGING_ATTEMPTS):
            cand = self._base / f"{_STAGING_PREFIX}-{os.getpid()}-{uuid.uuid4().hex[:12]}-{attempt}"
            try:
                cand.mkdir()
            except FileExistsError:
                continue
            except OSError as exc:
                raise FilesystemError("patchBackend.errors.createTempDirFailed", cand, exc) from exc
            self.path = cand
            return cand
        raise FilesystemError("patchBackend.errors.allocateUniqueTempDirFailed")

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.path is not None:
            shutil.rmtree(self.path, ignore_errors=True)
            self.path = None


def select_privileged_script(locale: str | None) -> str:
    return "anti-power.sh" if is_zh_locale(locale) else "anti-power.en.sh"


def build_script_args(mode: PatchMode, resources_root: Path,
                      cascade_enabled: bool, manager_enabled: bool) -> list[str]:
    return [
        "--mode", mode.value,
        "--app-path", str(resources_root),
        "--cascade-enabled", "true" if cascade_enabled else "false",
        "--manager-enabled", "true" if manager_enabled else "false",
    ]


def stage_bundle(staging: Path) -> None:
    for rel, content in embedded.get_all_files():
        write_file(staging / rel, content)


def render_configs(staging: Path, features: FeatureConfig,
                   manager_features: ManagerFeatureConfig) -> None:
    # Both sidebar layouts get a config; the helper decides which one it installs.
    write_config_file(staging / LEGACY_SIDEBAR.panel_dir / CONFIG_FILENAME, features)
    write_config_file(staging / MODERN_SIDEBAR.panel_dir / CONFIG_FILENAME, features)
    write_config_file(staging / MANAGER.panel_dir / CONFIG_FILENAME, manager_features)


def make_executable(script_path: Path) -> None:
    try:
        script_path.chmod(0o755)
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.setScriptPermissionsFailed",
                              script_path, exc) from exc


def annotate_failure(error: PatchError, resources_root: Path,
                     platform: PlatformSupport) -> PrivilegedScriptFailed:
    """Wrap an elevation failure, adding the platform hint for permission-origin causes."""
    hint_key = None
    if platform.permission_hint_key:
        details = error.details_for_match()
        if "operation not permitted" in details.lower() or "权限" in details:
            hint_key = platform.permission_hint_key
    return PrivilegedScriptFailed(error, resources_root, hint_key)


def run_privileged_patch(
    mode: PatchMode,
    resources_root: Path,
    features: FeatureConfig | None,
    manager_features: ManagerFeatureConfig | None,
    *,
    platform: PlatformSupport,
    locale: str | None = None,
    log_fn=None,
    staging_base: Path | None = None,
) -> None:
    """Run *mode* against *resources_root* through the elevated helper script."""
    _log = log_fn or (lambda _: None)

    with StagingDir(staging_base) as staging:
        stage_bundle(staging)

        if mode.carries_config:
            if features is None:
                raise MissingFeatureConfig("patchBackend.errors.missingSidebarConfig")
            if manager_features is None:
                raise MissingFeatureConfig("patchBackend.errors.missingManagerConfig")
            render_configs(staging, features, manager_features)

        script_name = select_privileged_script(locale)
        script_path = staging / script_name
        if not script_path.is_file():
            raise ScriptMissing(script_name)
        make_executable(script_path)

        args = build_script_args(
            mode,
            resources_root,
            cascade_enabled=features.enabled if features is not None else True,
            manager_enabled=manager_features.enabled if manager_features is not None else True,
        )
        _log(f"Requesting administrator rights ({platform.name}) to {mode.value} ...")
        try:
            platform.run_privileged_script(script_path, args, staging / _STATUS_FILENAME)
        except PatchError as exc:
            raise annotate_failure(exc, resources_root, platform) from exc
        _log(f"Elevated {mode.value} finished.")
