"""Tests for settings management."""

import json
from unittest.mock import patch

from config import NIGHTSCOUT, STORAGE
from storage.settings import AppSettings, SettingsManager, get_settings_manager


class TestAppSettings:
    """Tests for AppSettings dataclass."""

    def test_default_values(self):
        assert AppSettings().nightscout_url == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_from_dict_missing_url(self):
        assert AppSettings.from_dict({}).nightscout_url == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_to_dict(self):
        data = AppSettings(nightscout_url="https://ns.example.com").to_dict()
        assert data == {"nightscout_url": "https://ns.example.com"}


class TestSettingsManager:
    """Tests for SettingsManager."""

    def test_no_file(self, temp_data_dir):
        manager = SettingsManager(temp_data_dir)
        assert manager.get_nightscout_url() == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_persists(self, temp_data_dir):
        manager = SettingsManager(temp_data_dir)
        manager.set_nightscout_url("https://ns.example.com")

        data = json.loads((temp_data_dir / STORAGE.SETTINGS_FILE).read_text(encoding="utf-8"))
        assert data["nightscout_url"] == "https://ns.example.com"
        assert SettingsManager(temp_data_dir).get_nightscout_url() == "https://ns.example.com"

    def test_creates_data_dir(self, temp_data_dir):
        data_dir = temp_data_dir / "nested"
        SettingsManager(data_dir).set_nightscout_url("https://ns.example.com")
        assert (data_dir / STORAGE.SETTINGS_FILE).exists()

    def test_corrupt_file(self, temp_data_dir):
        (temp_data_dir / STORAGE.SETTINGS_FILE).write_text("{not json", encoding="utf-8")

        manager = SettingsManager(temp_data_dir)

        assert manager.get_nightscout_url() == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_non_object_file(self, temp_data_dir):
        (temp_data_dir / STORAGE.SETTINGS_FILE).write_text("[]", encoding="utf-8")
        assert SettingsManager(temp_data_dir).get_nightscout_url() == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_failed_save_keeps_previous_file(self, temp_data_dir):
        manager = SettingsManager(temp_data_dir)
        manager.set_nightscout_url("https://first.example.com")

        with patch("storage.settings.json.dump", side_effect=OSError("disk full")):
            manager.set_nightscout_url("https://second.example.com")

        data = json.loads((temp_data_dir / STORAGE.SETTINGS_FILE).read_text(encoding="utf-8"))
        assert data["nightscout_url"] == "https://first.example.com"
        assert not list(temp_data_dir.glob(".*.tmp"))

    def test_reload_picks_up_edits(self, temp_data_dir):
        manager = SettingsManager(temp_data_dir)
        (temp_data_dir / STORAGE.SETTINGS_FILE).write_text(
            json.dumps({"nightscout_url": "https://edited.example.com"}), encoding="utf-8")

        assert manager.reload() == "https://edited.example.com"
        assert manager.get_nightscout_url() == "https://edited.example.com"

    def test_env_overrides_file(self, temp_data_dir, monkeypatch):
        manager = SettingsManager(temp_data_dir)
        manager.set_nightscout_url("https://stored.example.com")
        monkeypatch.setenv(NIGHTSCOUT.URL_ENV_VAR, "https://env.example.com")

        assert manager.initial_url() == "https://env.example.com"

    def test_initial_url_without_env(self, temp_data_dir):
        assert SettingsManager(temp_data_dir).initial_url() == NIGHTSCOUT.DEFAULT_BASE_URL

    def test_factory(self, temp_data_dir):
        assert get_settings_manager(temp_data_dir).data_dir == temp_data_dir
