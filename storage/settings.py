"""Settings persistence for Nightscout Tray.

Only one value is persisted: the Nightscout base URL.
"""
import json
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import NIGHTSCOUT, STORAGE, get_logger

logger = get_logger(__name__)


@dataclass
class AppSettings:
    """Application settings."""
    nightscout_url: str = NIGHTSCOUT.DEFAULT_BASE_URL

    def to_dict(self) -> dict:
        return {"nightscout_url": self.nightscout_url}

    @classmethod
    def from_dict(cls, data: dict) -> 'AppSettings':
        url = data.get("nightscout_url") or NIGHTSCOUT.DEFAULT_BASE_URL
        return cls(nightscout_url=str(url))


class SettingsManager:
    """Loads and saves the settings file."""

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.settings_file = data_dir / STORAGE.SETTINGS_FILE
        self._lock = threading.Lock()
        self._settings: AppSettings = AppSettings()
        self._load()

    def _load(self) -> None:
        """Load settings from file."""
        if not self.settings_file.exists():
            self._settings = AppSettings()
            return
        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must contain an object")
            self._settings = AppSettings.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.warning(f"Could not load settings: {e}")
            self._settings = AppSettings()

    def _save(self) -> None:
        """Save settings to file, replacing it atomically."""
        tmp_file = self.settings_file.with_name(f".{self.settings_file.name}.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, 'w', encoding='utf-8') as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            tmp_file.replace(self.settings_file)
        except OSError as e:
            if tmp_file.exists():
                tmp_file.unlink()
            logger.error(f"Error saving settings: {e}")

    def reload(self) -> str:
        """Re-read the settings file and return the stored base URL."""
        with self._lock:
            self._load()
            return self._settings.nightscout_url

    def get_nightscout_url(self) -> str:
        return self._settings.nightscout_url

    def set_nightscout_url(self, url: str) -> None:
        with self._lock:
            if url == self._settings.nightscout_url:
                return
            self._settings.nightscout_url = url
            self._save()
        logger.info(f"Nightscout URL saved: {url}")

    def initial_url(self) -> str:
        """Base URL to start with; the environment overrides the file."""
        return os.environ.get(NIGHTSCOUT.URL_ENV_VAR) or self.get_nightscout_url()


def get_settings_manager(data_dir: Optional[Path] = None) -> SettingsManager:
    """Create a settings manager for the data directory."""
    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    return SettingsManager(data_dir)
