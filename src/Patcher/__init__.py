"""
Antigravity patch engine.

Installs, reconfigures and removes the sidebar and manager UI patches,
falling back to an elevated helper script when the install is not writable.
"""

from .errors import PatchError
from .features import FeatureConfig, ManagerFeatureConfig
from .ide_version import IdeVersion, SidebarPatchVariant, VersionInfo
from .patch import (
    check_patch_status,
    detect_version,
    install_patch,
    read_manager_patch_config,
    read_patch_config,
    uninstall_patch,
    update_config,
)
from .platforms import PlatformSupport, current_platform

__all__ = ["PatchError", "FeatureConfig", "ManagerFeatureConfig", "IdeVersion",
           "SidebarPatchVariant", "VersionInfo", "install_patch", "uninstall_patch",
           "update_config", "check_patch_status", "read_patch_config",
           "read_manager_patch_config", "detect_version", "PlatformSupport",
           "current_platform"]
