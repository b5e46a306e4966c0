"""
i18n.py
Message lookup for the bundled locale tables (Utils/locales/*.json).

Keys are dotted paths into the JSON tree, e.g.
"patchBackend.errors.invalidInstallDir".  Placeholders in the text are
written {name} and filled from the variables mapping.  A missing key
renders as the key itself so nothing is ever silently dropped.

Usage:
    from Utils.i18n import text
    err.to_message(text, "en-US")
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

_LOCALES_DIR = Path(__file__).resolve().parent / "locales"

ZH_LOCALE = "zh-CN"
EN_LOCALE = "en-US"
SUPPORTED_LOCALES = (ZH_LOCALE, EN_LOCALE)


def is_zh_locale(locale: str | None) -> bool:
    """Chinese unless a non-zh locale is given explicitly."""
    if locale is None:
        return True
    return locale.lower().startswith("zh")


@lru_cache(maxsize=None)
def _load_table(name: str) -> dict[str, Any]:
    try:
        data = json.loads((_LOCALES_DIR / f"{name}.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _lookup(table: dict[str, Any], key: str) -> str | None:
    node: Any = table
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def text(locale: str | None, key: str, variables: Mapping[str, str] | None = None) -> str:
    """Return the localized message for *key* with {placeholders} filled in."""
    table = _load_table(ZH_LOCALE if is_zh_locale(locale) else EN_LOCALE)
    message = _lookup(table, key)
    if message is None:
        message = key
    for name, value in (variables or {}).items():
        message = message.replace("{" + name + "}", str(value))
    return message
