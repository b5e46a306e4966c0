"""
patch.py
Install, uninstall and reconfigure the Antigravity patches.

Provides install_patch(), uninstall_patch(), update_config() and the
read-only queries check_patch_status(), read_patch_config(),
read_manager_patch_config() and detect_version().  Front ends call these;
every failure is raised as a PatchError subclass.

Each mutating operation follows the same path:
  1. resolve the install root from whatever path the user gave us
  2. system-owned install (e.g. /usr/share/...)  -> elevated helper right away
  3. otherwise probe the target directories      -> elevated helper if any is unwritable
  4. otherwise write directly; a write refused by the OS part-way through
     is retried once through the elevated helper
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from Patcher import backup, checksums, deploy, embedded, permissions, privileged
from Patcher.errors import (
    ConfigParseError,
    FilesystemError,
    InvalidInstallDirectory,
    MissingExpectedSubdirectory,
    PatchError,
    PatchNotInstalled,
    PermissionDeniedError,
)
from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Patcher.ide_version import (
    SidebarPatchVariant,
    VersionInfo,
    detect_sidebar_patch_variant,
    detect_version_info,
)
from Patcher.paths import extensions_dir, normalize_root, resources_app_root, workbench_dir
from Patcher.platforms import PlatformSupport, current_platform
from Patcher.privileged import PatchMode
from Patcher.subsystems import ALL_SUBSYSTEMS, LEGACY_SIDEBAR, MANAGER, MODERN_SIDEBAR


def resolve_resources_root(path: str | Path) -> Path:
    """Return <root>/resources/app for any path inside (or above) an install."""
    root = normalize_root(path)
    if root is None:
        raise InvalidInstallDirectory()
    return resources_app_root(root)


class _Operation:
    """One command invocation: the mode, its configs and its collaborators."""

    def __init__(self, mode: PatchMode, resources_root: Path,
                 features: FeatureConfig | None,
                 manager_features: ManagerFeatureConfig | None,
                 platform: PlatformSupport, locale: str | None, log_fn):
        self.mode = mode
        self.resources_root = resources_root
        self.features = features
        self.manager_features = manager_features
        self.platform = platform
        self.locale = locale
        self.log = log_fn or (lambda _: None)
        self.escalated = False

    def escalate(self) -> None:
        # At most one elevated attempt per operation, whatever it fails with
        self.escalated = True
        privileged.run_privileged_patch(
            self.mode, self.resources_root, self.features, self.manager_features,
            platform=self.platform, locale=self.locale, log_fn=self.log,
        )

    def escalate_for(self, directory: Path) -> None:
        """Hand off to the helper because *directory* is not writable."""
        if not self.platform.supports_elevation:
            raise PermissionDeniedError(directory)
        self.log(f"No write access to {directory}")
        self.escalate()

    def run(self, direct: Callable[[_Operation], None]) -> None:
        if self.platform.requires_elevation(self.resources_root):
            self.log(f"{self.resources_root} is a system location")
            self.escalate()
            return
        try:
            direct(self)
        except PatchError as exc:
            if (self.escalated or not self.platform.supports_elevation
                    or not permissions.is_permission_error(exc)):
                raise
            self.log(f"Write refused ({exc}); retrying with administrator rights")
            self.escalate()


def _operation(mode, path, features, manager_features, platform, locale, log_fn) -> _Operation:
    return _Operation(mode, resolve_resources_root(path), features, manager_features,
                      platform or current_platform(), locale, log_fn)


# ---------------------------------------------------------------------------
# Install
# ---------------------------------------------------------------------------

def _install_direct(op: _Operation) -> None:
    root = op.resources_root
    ext_dir = extensions_dir(root)
    wb_dir = workbench_dir(root)
    if not ext_dir.exists():
        raise InvalidInstallDirectory()
    if not wb_dir.exists():
        raise MissingExpectedSubdirectory("patchBackend.errors.managerDirMissing")

    blocked = permissions.first_unwritable_dir([ext_dir, wb_dir, root])
    if blocked is not None:
        op.escalate_for(blocked)
        return

    features, manager_features = op.features, op.manager_features
    variant = detect_sidebar_patch_variant(root)
    op.log(f"Sidebar layout: {variant.value}")

    files: list[tuple[str, str]] | None = None
    if features.enabled or manager_features.enabled:
        files = embedded.get_all_files()

    if features.enabled:
        if variant is SidebarPatchVariant.MODERN:
            active, stale = MODERN_SIDEBAR, LEGACY_SIDEBAR
        else:
            active, stale = LEGACY_SIDEBAR, MODERN_SIDEBAR
        backup.backup_subsystem(active, root, log_fn=op.log)
        deploy.deploy_subsystem(active, root, features, files, log_fn=op.log)
        # Leftovers from before an Antigravity upgrade/downgrade
        backup.restore_subsystem(stale, root, log_fn=op.log)
    else:
        backup.restore_subsystem(LEGACY_SIDEBAR, root, log_fn=op.log)
        backup.restore_subsystem(MODERN_SIDEBAR, root, log_fn=op.log)

    if manager_features.enabled:
        backup.backup_subsystem(MANAGER, root, log_fn=op.log)
        deploy.deploy_subsystem(MANAGER, root, manager_features, files, log_fn=op.log)
    else:
        backup.restore_subsystem(MANAGER, root, log_fn=op.log)

    if features.enabled or manager_features.enabled:
        checksums.clean_checksums(root / "product.json", log_fn=op.log)


def install_patch(
    path: str | Path,
    features: FeatureConfig | None = None,
    manager_features: ManagerFeatureConfig | None = None,
    *,
    locale: str | None = None,
    platform: PlatformSupport | None = None,
    log_fn=None,
) -> None:
    """Deploy (or, for disabled subsystems, restore) the patches."""
    op = _operation(PatchMode.INSTALL, path,
                    features or FeatureConfig(), manager_features or ManagerFeatureConfig(),
                    platform, locale, log_fn)
    op.log(f"Installing patch into {op.resources_root}")
    op.run(_install_direct)
    op.log("Install complete.")


# ---------------------------------------------------------------------------
# Uninstall
# ---------------------------------------------------------------------------

def _uninstall_direct(op: _Operation) -> None:
    root = op.resources_root
    ext_dir = extensions_dir(root)
    wb_dir = workbench_dir(root)
    if not ext_dir.exists():
        raise InvalidInstallDirectory()

    blocked = permissions.first_unwritable_dir([ext_dir, wb_dir])
    if blocked is not None:
        op.escalate_for(blocked)
        return

    backup.restore_all(root, log_fn=op.log)


def uninstall_patch(
    path: str | Path,
    *,
    locale: str | None = None,
    platform: PlatformSupport | None = None,
    log_fn=None,
) -> None:
    """Restore every original file, whichever layout was patched."""
    op = _operation(PatchMode.UNINSTALL, path, None, None, platform, locale, log_fn)
    op.log(f"Uninstalling patch from {op.resources_root}")
    op.run(_uninstall_direct)
    op.log("Uninstall complete.")


# ---------------------------------------------------------------------------
# Update config
# ---------------------------------------------------------------------------

def _update_config_direct(op: _Operation) -> None:
    root = op.resources_root
    installed = [s for s in ALL_SUBSYSTEMS if s.config_path(root).exists()]
    if not installed:
        raise PatchNotInstalled()

    blocked = permissions.first_unwritable_dir([s.panel_path(root) for s in installed])
    if blocked is not None:
        op.escalate_for(blocked)
        return

    for subsystem in installed:
        config = op.manager_features if subsystem.uses_manager_config else op.features
        deploy.write_config_file(subsystem.config_path(root), config)
        op.log(f"  Updated {subsystem.panel_dir}/config.json")


def update_config(
    path: str | Path,
    features: FeatureConfig | None = None,
    manager_features: ManagerFeatureConfig | None = None,
    *,
    locale: str | None = None,
    platform: PlatformSupport | None = None,
    log_fn=None,
) -> None:
    """Rewrite config.json of every installed subsystem; patch files are left alone."""
    op = _operation(PatchMode.UPDATE_CONFIG, path,
                    features or FeatureConfig(), manager_features or ManagerFeatureConfig(),
                    platform, locale, log_fn)
    op.run(_update_config_direct)
    op.log("Configuration updated.")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def check_patch_status(path: str | Path) -> bool:
    """True if any subsystem's config.json is present."""
    root = resolve_resources_root(path)
    return any(s.config_path(root).exists() for s in ALL_SUBSYSTEMS)


def _read_config(config_path: Path, cls, read_key: str, parse_key: str):
    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FilesystemError(read_key, config_path, exc) from exc
    try:
        data = json.loads(content)
    except ValueError as exc:
        raise ConfigParseError(parse_key, detail=str(exc)) from exc
    return cls.from_dict(data)


def read_patch_config(path: str | Path) -> FeatureConfig | None:
    """Return the installed sidebar config (legacy layout first), or None."""
    root = resolve_resources_root(path)
    for subsystem in (LEGACY_SIDEBAR, MODERN_SIDEBAR):
        config_path = subsystem.config_path(root)
        if config_path.exists():
            return _read_config(config_path, FeatureConfig,
                                "patchBackend.errors.readConfigFailed",
                                "patchBackend.errors.parseConfigFailed")
    return None


def read_manager_patch_config(path: str | Path) -> ManagerFeatureConfig | None:
    root = resolve_resources_root(path)
    config_path = MANAGER.config_path(root)
    if not config_path.exists():
        return None
    return _read_config(config_path, ManagerFeatureConfig,
                        "patchBackend.errors.readManagerConfigFailed",
                        "patchBackend.errors.parseManagerConfigFailed")


def detect_version(path: str | Path) -> VersionInfo | None:
    """Return the ideVersion and sidebar layout, or None for an invalid path."""
    root = normalize_root(path)
    if root is None:
        return None
    return detect_version_info(resources_app_root(root))
