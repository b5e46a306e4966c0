"""
errors.py
Typed failures raised by the patch engine.

Every error carries a message key (looked up in the locale tables by
Utils.i18n) and the substitution variables for that message.  The engine
never builds user-facing text itself; front ends call
``err.to_message(text, locale)`` with a lookup function.
"""

from __future__ import annotations

import errno
from pathlib import Path
from typing import Callable, Mapping

TextLookup = Callable[[str | None, str, Mapping[str, str]], str]

_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM, errno.EROFS})


class PatchError(Exception):
    """Base class for all patch engine failures."""

    def __init__(self, key: str, **variables):
        self.key = key
        self.variables = {name: str(value) for name, value in variables.items()}
        super().__init__(self._fallback_text())

    def _fallback_text(self) -> str:
        if not self.variables:
            return self.key
        detail = ", ".join(f"{k}={v}" for k, v in self.variables.items())
        return f"{self.key} ({detail})"

    def details_for_match(self) -> str:
        """Return the raw variable values, newline-joined, for classification."""
        return "\n".join(self.variables.values())

    def to_message(self, text: TextLookup, locale: str | None = None) -> str:
        return text(locale, self.key, self.variables)


class InvalidInstallDirectory(PatchError):
    def __init__(self):
        super().__init__("patchBackend.errors.invalidInstallDir")


class MissingExpectedSubdirectory(PatchError):
    def __init__(self, key: str = "patchBackend.errors.managerDirMissing", **variables):
        super().__init__(key, **variables)


class PatchNotInstalled(PatchError):
    def __init__(self):
        super().__init__("patchBackend.errors.patchNotInstalled")


class PermissionDeniedError(PatchError):
    """Raised where no elevation path exists for an unwritable directory."""
    def __init__(self, directory: Path | str):
        super().__init__("patchBackend.errors.permissionDeniedDir", dir=directory)
        self.directory = Path(directory)


class FilesystemError(PatchError):
    """Read/write/copy/remove failure with the path and OS detail attached."""

    def __init__(self, key: str, path: Path | str | None = None,
                 cause: OSError | UnicodeDecodeError | None = None, **variables):
        if "detail" not in variables:
            parts = [str(p) for p in (path, cause) if p is not None]
            variables["detail"] = ": ".join(parts)
        super().__init__(key, **variables)
        self.path = Path(path) if path is not None else None
        self.cause = cause

    @property
    def is_permission_related(self) -> bool:
        if isinstance(self.cause, PermissionError):
            return True
        return getattr(self.cause, "errno", None) in _PERMISSION_ERRNOS


class ManifestParseError(PatchError):
    pass


class ConfigParseError(PatchError):
    pass


class AssetBundleUnavailable(PatchError):
    pass


class MissingFeatureConfig(PatchError):
    pass


class ScriptMissing(PatchError):
    def __init__(self, name: str):
        super().__init__("patchBackend.errors.notFound", name=name)
        self.name = name


class ElevationError(PatchError):
    """Base class for failures of the elevated helper run."""


class ElevationInvocationFailed(ElevationError):
    pass


class ElevationTimedOut(ElevationError):
    def __init__(self):
        super().__init__("patchBackend.errors.terminalNotFinished")


class ElevationNonZeroExit(ElevationError):
    """The helper ran and reported failure.

    ``output`` holds the helper's own stderr/stdout when it printed any;
    the message is then that raw text instead of a localized one.
    """

    def __init__(self, key: str = "patchBackend.errors.privilegedCanceledOrFailed",
                 code: int | None = None, output: str = "", **variables):
        if code is not None:
            variables.setdefault("code", code)
        if output:
            variables.setdefault("output", output)
        super().__init__(key, **variables)
        self.code = code
        self.output = output

    def to_message(self, text: TextLookup, locale: str | None = None) -> str:
        if self.output:
            return self.output
        return super().to_message(text, locale)


class ElevationUnsupported(ElevationError):
    def __init__(self):
        super().__init__("patchBackend.errors.unsupportedPrivilegedFlow")


class PrivilegedScriptFailed(PatchError):
    """Single surfaced error for a failed escalation.

    The message is composed at render time: the cause's own message,
    optionally wrapped in a platform hint that names the resources root.
    """

    def __init__(self, cause: PatchError, resources_root: Path,
                 hint_key: str | None = None):
        super().__init__("patchBackend.errors.privilegedScriptFailed",
                         message=cause.details_for_match() or cause.key)
        self.cause = cause
        self.resources_root = Path(resources_root)
        self.hint_key = hint_key

    def to_message(self, text: TextLookup, locale: str | None = None) -> str:
        message = self.cause.to_message(text, locale)
        if self.hint_key:
            message = text(locale, self.hint_key,
                           {"message": message, "path": str(self.resources_root)})
        return text(locale, self.key, {"message": message})
