import os
import yaml

from settings_schema import SettingsSchema, load_settings, validate_settings

APP_VERSION = "1.0.0"
DEFAULT_DB_PATH = "workout_diary.db"
DEFAULT_SETTINGS_PATH = "settings.yaml"


def db_path_from_env(default: str = DEFAULT_DB_PATH) -> str:
    return os.environ.get("DIARY_DB") or default


def settings_path_from_env(default: str = DEFAULT_SETTINGS_PATH) -> str:
    return os.environ.get("DIARY_SETTINGS") or default


class YamlConfig:
    """Load and save diary settings to a YAML file."""

    def __init__(self, path: str = DEFAULT_SETTINGS_PATH) -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)

    def settings(self) -> SettingsSchema:
        """Return the validated settings, filling in defaults."""
        return load_settings(self.load())
