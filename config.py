import os
import yaml

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save settings to a YAML file."""

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def save(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)


def load_settings(path: str = "settings.yaml") -> SettingsSchema:
    """Return validated settings from ``path`` merged over the defaults.

    Keys the schema does not know about are kept in the YAML file but
    ignored here. ``DB_PATH`` overrides ``db_path``.
    """
    data = {
        k: v for k, v in YamlConfig(path).load().items()
        if k in SettingsSchema.model_fields
    }
    settings = validate_settings(data)
    env_db = os.environ.get("DB_PATH")
    if env_db:
        settings.db_path = env_db
    return settings
