"""
features.py
Display options for the two patch subsystems.

FeatureConfig drives the sidebar patch, ManagerFeatureConfig the manager
window patch.  Both round-trip through the camelCase JSON shape the patch
scripts read from config.json; unknown keys are ignored and missing keys
take their defaults.  ``enabled`` is never written to config.json — it only
decides whether the subsystem is deployed or restored.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

# snake_case attribute -> camelCase JSON key
_JSON_KEYS = {
    "enabled": "enabled",
    "mermaid": "mermaid",
    "math": "math",
    "copy_button": "copyButton",
    "table_color": "tableColor",
    "max_width_enabled": "maxWidthEnabled",
    "max_width_ratio": "maxWidthRatio",
    "font_size_enabled": "fontSizeEnabled",
    "font_size": "fontSize",
    "copy_button_smart_hover": "copyButtonSmartHover",
    "copy_button_bottom_position": "copyButtonShowBottom",
    "copy_button_style": "copyButtonStyle",
    "copy_button_custom_text": "copyButtonCustomText",
}


class _JsonConfig:
    """Shared camelCase (de)serialization for the config dataclasses."""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None):
        if not isinstance(data, dict):
            return cls()
        kwargs = {}
        defaults = cls()
        for f in fields(cls):
            key = _JSON_KEYS[f.name]
            if key not in data:
                continue
            value = data[key]
            default = getattr(defaults, f.name)
            if isinstance(default, bool):
                if isinstance(value, bool):
                    kwargs[f.name] = value
            elif isinstance(default, float):
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    kwargs[f.name] = float(value)
            elif isinstance(value, str):
                kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Full camelCase mapping, including ``enabled``."""
        return {_JSON_KEYS[name]: value for name, value in asdict(self).items()}

    def to_config_json(self) -> dict[str, Any]:
        """The mapping written to the deployed config.json (no ``enabled``)."""
        data = self.to_dict()
        data.pop("enabled", None)
        return data


@dataclass
class FeatureConfig(_JsonConfig):
    """Sidebar options.  Disabling restores every sidebar file."""
    enabled: bool = True
    mermaid: bool = True
    math: bool = True
    copy_button: bool = True
    table_color: bool = True
    font_size_enabled: bool = True
    font_size: float = 16.0
    copy_button_smart_hover: bool = True
    copy_button_bottom_position: str = "float"
    copy_button_style: str = "icon"
    copy_button_custom_text: str = ""


@dataclass
class ManagerFeatureConfig(_JsonConfig):
    """Manager window options.  Disabling restores every manager file."""
    enabled: bool = True
    mermaid: bool = True
    math: bool = True
    copy_button: bool = True
    max_width_enabled: bool = True
    max_width_ratio: float = 75.0
    font_size_enabled: bool = True
    font_size: float = 16.0
    copy_button_smart_hover: bool = True
    copy_button_bottom_position: str = "float"
    copy_button_style: str = "icon"
    copy_button_custom_text: str = ""
