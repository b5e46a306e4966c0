"""
platforms.py
Per-OS behaviour behind one interface: finding Antigravity and running the
helper script with elevated rights.

  WindowsPlatform — registry + common install folders; no elevation path
                    (unwritable installs are reported, not escalated).
  MacPlatform     — /Applications bundles; elevation through a Terminal
                    window running sudo, observed via a status file.
  LinuxPlatform   — /usr/share, /opt, XDG data dirs; elevation through pkexec.

Usage:
    from Patcher.platforms import current_platform
    platform = current_platform()
    root = platform.detect_root()
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
import time
from abc import ABC, abstractmethod
from pathlib import Path

from Patcher.errors import (
    ElevationInvocationFailed,
    ElevationNonZeroExit,
    ElevationTimedOut,
    ElevationUnsupported,
    FilesystemError,
)
from Patcher.paths import normalize_root

_HOME = Path.home()

# Install locations owned by the system: writes there need elevation even
# before a probe fails (a probe can succeed under macOS SIP and still break).
_SYSTEM_PREFIXES = (
    "/Applications/",
    "/System/Applications/",
    "/Library/",
    "/System/",
    "/usr/",
    "/opt/",
    "/lib/",
    "/lib64/",
    "/var/",
    "/snap/",
)


def _first_valid(candidates) -> Path | None:
    for cand in candidates:
        root = normalize_root(cand)
        if root is not None:
            return root
    return None


class PlatformSupport(ABC):

    name: str = ""

    # Whether run_privileged_script() can do anything on this OS
    supports_elevation: bool = True

    # Message key wrapping a permission-origin elevation failure, or None
    permission_hint_key: str | None = None

    # Default elevation deadline for asynchronous elevation sessions
    elevation_timeout: float = 900.0
    poll_interval: float = 0.5

    @abstractmethod
    def candidate_paths(self) -> list[Path]:
        """Well-known install locations, most likely first."""

    def detect_root(self) -> Path | None:
        """Return the first detected Antigravity root, or None."""
        return _first_valid(self.candidate_paths())

    def requires_elevation(self, resources_root: Path) -> bool:
        """True if *resources_root* lives in a system-owned location."""
        return False

    @abstractmethod
    def run_privileged_script(self, script_path: Path, args: list[str],
                              status_path: Path) -> None:
        """Run *script_path* with *args* as root; raise an ElevationError on failure."""


class WindowsPlatform(PlatformSupport):
    name = "windows"
    supports_elevation = False

    _UNINSTALL_KEYS = (
        r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall\Antigravity",
        r"SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall\Antigravity",
    )

    def registry_paths(self) -> list[Path]:
        try:
            import winreg
        except ImportError:
            return []
        found: list[Path] = []
        for hive in (winreg.HKEY_LOCAL_MACHINE, winreg.HKEY_CURRENT_USER):
            for key_path in self._UNINSTALL_KEYS:
                try:
                    with winreg.OpenKey(hive, key_path) as key:
                        location, _ = winreg.QueryValueEx(key, "InstallLocation")
                except OSError:
                    continue
                if isinstance(location, str) and location:
                    found.append(Path(location))
        return found

    def candidate_paths(self) -> list[Path]:
        paths = self.registry_paths()
        paths += [Path(rf"{drive}:\Program Files\Antigravity") for drive in "CDE"]
        local = os.environ.get("LOCALAPPDATA")
        if local:
            paths.append(Path(local) / "Programs" / "Antigravity")
        return paths

    def run_privileged_script(self, script_path: Path, args: list[str],
                              status_path: Path) -> None:
        raise ElevationUnsupported()


class _PosixPlatform(PlatformSupport):

    def requires_elevation(self, resources_root: Path) -> bool:
        path = str(resources_root)
        return any(path.startswith(prefix) for prefix in _SYSTEM_PREFIXES)


class MacPlatform(_PosixPlatform):
    name = "macos"
    permission_hint_key = "patchBackend.errors.macosPermissionHint"

    def candidate_paths(self) -> list[Path]:
        user_app = _HOME / "Applications" / "Antigravity.app"
        return [
            Path("/Applications/Antigravity.app"),
            Path("/Applications/Antigravity.app/Contents"),
            user_app,
            user_app / "Contents",
        ]

    def terminal_command(self, script_path: Path, args: list[str],
                         status_path: Path) -> str:
        command_line = " ".join(shlex.quote(part) for part in
                                ["/bin/bash", str(script_path), *args])
        return f"sudo {command_line} ; echo $? > {shlex.quote(str(status_path))}"

    def run_privileged_script(self, script_path: Path, args: list[str],
                              status_path: Path) -> None:
        # The Terminal session is detached from us; its exit code comes back
        # through status_path.
        command = self.terminal_command(script_path, args, status_path)
        escaped = command.replace("\\", "\\\\").replace('"', '\\"')
        apple_script = f'tell application "Terminal"\nactivate\ndo script "{escaped}"\nend tell'
        try:
            result = subprocess.run(["osascript", "-e", apple_script],
                                    capture_output=True, text=True)
        except OSError as exc:
            raise ElevationInvocationFailed(
                "patchBackend.errors.invokeTerminalFailed", detail=str(exc)) from exc
        if result.returncode != 0:
            # Terminal never got the command, so no status file will appear
            detail = (result.stderr or "").strip() or f"osascript exited with {result.returncode}"
            raise ElevationInvocationFailed(
                "patchBackend.errors.invokeTerminalFailed", detail=detail)
        wait_for_status(status_path, self.elevation_timeout, self.poll_interval)


class LinuxPlatform(_PosixPlatform):
    name = "linux"

    def candidate_paths(self) -> list[Path]:
        paths = [Path(p) for p in (
            "/usr/share/antigravity",
            "/usr/share/Antigravity",
            "/usr/local/share/antigravity",
            "/opt/antigravity",
            "/opt/Antigravity",
            "/usr/lib/antigravity",
            "/usr/lib64/antigravity",
        )]
        xdg_data = os.environ.get("XDG_DATA_HOME")
        data_dir = Path(xdg_data) if xdg_data else _HOME / ".local" / "share"
        paths.append(data_dir / "antigravity")
        return paths

    def run_privileged_script(self, script_path: Path, args: list[str],
                              status_path: Path) -> None:
        try:
            result = subprocess.run(
                ["pkexec", "/bin/bash", str(script_path), *args],
                capture_output=True, text=True,
            )
        except FileNotFoundError as exc:
            raise ElevationInvocationFailed("patchBackend.errors.pkexecNotFound") from exc
        except OSError as exc:
            raise ElevationInvocationFailed(
                "patchBackend.errors.executePkexecFailed", detail=str(exc)) from exc

        if result.returncode == 0:
            return
        output = (result.stderr or "").strip() or (result.stdout or "").strip()
        raise ElevationNonZeroExit(code=result.returncode, output=output)


def wait_for_status(status_path: Path, timeout: float, poll_interval: float = 0.5) -> None:
    """Poll *status_path* for an exit code written by a detached session.

    Raises ElevationTimedOut if nothing appears within *timeout* seconds and
    ElevationNonZeroExit for any code other than 0 (unparsable counts as 1).
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if status_path.exists():
            try:
                content = status_path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise FilesystemError("patchBackend.errors.readStatusFileFailed",
                                      status_path, exc) from exc
            try:
                status_path.unlink()
            except OSError:
                pass
            try:
                code = int(content.strip())
            except ValueError:
                code = 1
            if code == 0:
                return
            raise ElevationNonZeroExit("patchBackend.errors.terminalCommandFailedCode", code=code)
        time.sleep(poll_interval)
    raise ElevationTimedOut()


def current_platform() -> PlatformSupport:
    if sys.platform.startswith("win"):
        return WindowsPlatform()
    if sys.platform == "darwin":
        return MacPlatform()
    return LinuxPlatform()
