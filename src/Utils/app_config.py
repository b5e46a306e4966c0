"""
app_config.py
Load and save the patcher's own settings (config.json in the config dir).

Stored shape:
    {
      "antigravityPath": "/opt/antigravity",
      "locale": "en-US",
      "features":        { ...FeatureConfig camelCase keys... },
      "managerFeatures": { ...ManagerFeatureConfig camelCase keys... }
    }

A missing or unreadable file yields the defaults; saving failures raise.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Utils.config_paths import get_app_config_path
from Utils.i18n import EN_LOCALE


@dataclass
class AppConfig:
    antigravity_path: str | None = None
    locale: str = EN_LOCALE
    features: FeatureConfig = field(default_factory=FeatureConfig)
    manager_features: ManagerFeatureConfig = field(default_factory=ManagerFeatureConfig)

    @classmethod
    def from_dict(cls, data: dict) -> AppConfig:
        if not isinstance(data, dict):
            return cls()
        path = data.get("antigravityPath")
        locale = data.get("locale")
        return cls(
            antigravity_path=path if isinstance(path, str) and path else None,
            locale=locale if isinstance(locale, str) and locale else EN_LOCALE,
            features=FeatureConfig.from_dict(data.get("features")),
            manager_features=ManagerFeatureConfig.from_dict(data.get("managerFeatures")),
        )

    def to_dict(self) -> dict:
        return {
            "antigravityPath": self.antigravity_path,
            "locale": self.locale,
            "features": self.features.to_dict(),
            "managerFeatures": self.manager_features.to_dict(),
        }


def load_app_config(path: Path | None = None) -> AppConfig:
    path = path or get_app_config_path()
    if not path.is_file():
        return AppConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    return AppConfig.from_dict(data)


def save_app_config(config: AppConfig, path: Path | None = None) -> None:
    path = path or get_app_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2, ensure_ascii=False),
                        encoding="utf-8")
    except OSError as e:
        raise RuntimeError(f"Cannot save settings to {path}: {e}") from e
