"""
checksums.py
Drop the integrity entries for patched files from product.json.

Antigravity verifies the files listed under product.json "checksums" at
startup and reports itself as corrupted when one differs.  Patching the
entry files therefore requires removing their entries.  The removal is
one-way: uninstall does not put them back.
"""

from __future__ import annotations

import json
from pathlib import Path

from Patcher.errors import FilesystemError, ManifestParseError

CHECKSUMS_TO_REMOVE: tuple[str, ...] = (
    "extensions/antigravity/cascade-panel.html",
    "vs/code/electron-browser/workbench/workbench.html",
    "vs/code/electron-browser/workbench/workbench-jetski-agent.html",
)


def clean_checksums(product_json: Path, log_fn=None) -> int:
    """Remove the patched files' checksum entries.  Returns how many were removed.

    The file is only rewritten when something was actually removed.
    """
    _log = log_fn or (lambda _: None)
    if not product_json.exists():
        return 0

    try:
        text = product_json.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FilesystemError("patchBackend.errors.readProductJsonFailed", product_json, exc) from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ManifestParseError("patchBackend.errors.parseProductJsonFailed", detail=str(exc)) from exc

    checksums = data.get("checksums") if isinstance(data, dict) else None
    if not isinstance(checksums, dict):
        return 0

    removed = 0
    for key in CHECKSUMS_TO_REMOVE:
        if key in checksums:
            del checksums[key]
            removed += 1
    if not removed:
        return 0

    try:
        product_json.write_bytes(
            json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8"))
    except OSError as exc:
        raise FilesystemError("patchBackend.errors.writeProductJsonFailed", product_json, exc) from exc
    _log(f"  Removed {removed} checksum entr{'y' if removed == 1 else 'ies'} from product.json")
    return removed
