"""Tests for settings persistence, validation and the interval model."""

import json

import pytest
import yaml

from interval_backup.config.config_manager import ConfigManager
from interval_backup.config.config_validator import ConfigValidator
from interval_backup.core.models import BackupConfig, Interval


@pytest.fixture
def no_default_files(tmp_path, monkeypatch):
    settings_dir = tmp_path / "home_settings"
    monkeypatch.setattr(ConfigManager, "SETTINGS_DIR", str(settings_dir))
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_LOCATIONS", [])
    return settings_dir


def valid_settings(tmp_path):
    return {
        "source_dir": str(tmp_path / "docs"),
        "backup_dir": str(tmp_path / "backups"),
        "interval": "THIRTY",
        "language": "de",
    }


# ---------------------------------------------------------------------------
# Interval / BackupConfig
# ---------------------------------------------------------------------------

class TestInterval:
    def test_millisecond_values(self):
        assert [i.millis for i in Interval] == [
            600000, 1200000, 1800000, 2400000, 3000000, 3600000, 7200000,
        ]

    def test_minutes_and_seconds(self):
        assert Interval.ONE_HUNDRED_TWENTY.minutes == 120
        assert Interval.TEN.seconds == 600

    @pytest.mark.parametrize("value,expected", [
        ("TEN", Interval.TEN),
        ("sixty", Interval.SIXTY),
        ("20", Interval.TWENTY),
        (120, Interval.ONE_HUNDRED_TWENTY),
        (Interval.FORTY, Interval.FORTY),
    ])
    def test_from_value(self, value, expected):
        assert Interval.from_value(value) is expected

    @pytest.mark.parametrize("value", ["FIVE", "15", 15, True, "", None])
    def test_from_value_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            Interval.from_value(value)


class TestBackupConfig:
    def test_empty_paths_rejected(self):
        with pytest.raises(ValueError):
            BackupConfig(source_dir="", backup_dir="/tmp/b")
        with pytest.raises(ValueError):
            BackupConfig(source_dir="/tmp/a", backup_dir="")

    def test_interval_must_be_enum(self):
        with pytest.raises(ValueError):
            BackupConfig(source_dir="/a", backup_dir="/b", interval=600000)

    def test_immutable(self):
        config = BackupConfig(source_dir="/a", backup_dir="/b")
        with pytest.raises(Exception):
            config.source_dir = "/c"


# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------

class TestLoadConfig:
    def test_defaults_without_settings_file(self, no_default_files):
        manager = ConfigManager()
        data = manager.load_config()

        assert data["source_dir"].endswith("Documents")
        assert data["backup_dir"].endswith("DataBackup")
        assert data["interval"] == "TEN"
        assert data["language"]
        assert manager.get_backup_config().interval is Interval.TEN

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(str(tmp_path / "absent.json")).load_config()

    def test_loads_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(valid_settings(tmp_path)))

        manager = ConfigManager(str(path))
        manager.load_config()
        config = manager.get_backup_config()

        assert config.source_dir == str(tmp_path / "docs")
        assert config.interval is Interval.THIRTY
        assert manager.get_logging_config()["level"] == "INFO"

    def test_loads_yaml_with_minutes(self, tmp_path):
        settings = valid_settings(tmp_path)
        settings["interval"] = 60
        settings["logging"] = {"level": "DEBUG", "file": str(tmp_path / "run.log")}
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump(settings))

        manager = ConfigManager(str(path))
        manager.load_config()

        assert manager.get_backup_config().interval is Interval.SIXTY
        assert manager.get_logging_config()["level"] == "DEBUG"

    def test_invalid_json_raises_value_error(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            ConfigManager(str(path)).load_config()

    def test_non_mapping_document_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            ConfigManager(str(path)).load_config()

    def test_unknown_interval_rejected(self, tmp_path):
        settings = valid_settings(tmp_path)
        settings["interval"] = "FIVE"
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(settings))

        with pytest.raises(ValueError, match="Invalid interval"):
            ConfigManager(str(path)).load_config()


class TestSaveConfig:
    def test_update_settings_persists_json(self, tmp_path):
        path = tmp_path / "conf" / "settings.json"
        path.parent.mkdir()
        path.write_text(json.dumps(valid_settings(tmp_path)))
        manager = ConfigManager(str(path))
        manager.load_config()

        manager.update_settings(interval=Interval.ONE_HUNDRED_TWENTY, language=None)

        stored = json.loads(path.read_text())
        assert stored["interval"] == "ONE_HUNDRED_TWENTY"
        assert stored["language"] == "de"

    def test_first_save_goes_to_user_settings_dir(self, no_default_files, tmp_path):
        manager = ConfigManager()
        manager.load_config()

        saved_to = manager.update_settings(source_dir=str(tmp_path / "work"))

        stored_path = no_default_files / "settings.json"
        assert manager.config_path == str(stored_path)
        assert json.loads(stored_path.read_text())["source_dir"] == saved_to["source_dir"]

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump(valid_settings(tmp_path)))
        manager = ConfigManager(str(path))
        manager.load_config()
        manager.update_settings(backup_dir=str(tmp_path / "elsewhere"))

        reloaded = ConfigManager(str(path))
        reloaded.load_config()

        assert reloaded.get_backup_config().backup_dir == str(tmp_path / "elsewhere")

    def test_invalid_update_is_not_saved(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(valid_settings(tmp_path)))
        manager = ConfigManager(str(path))
        manager.load_config()

        with pytest.raises(ValueError):
            manager.update_settings(source_dir="   ")

        assert json.loads(path.read_text())["source_dir"] == str(tmp_path / "docs")


class TestConfigValidator:
    def test_missing_fields(self):
        with pytest.raises(ValueError, match="Missing required settings"):
            ConfigValidator().validate({"source_dir": "/a"})

    def test_bad_logging_level(self, tmp_path):
        settings = valid_settings(tmp_path)
        settings["logging"] = {"level": "LOUD"}
        with pytest.raises(ValueError, match="logging level"):
            ConfigValidator().validate(settings)

    def test_language_must_be_string(self, tmp_path):
        settings = valid_settings(tmp_path)
        settings["language"] = 42
        with pytest.raises(ValueError):
            ConfigValidator().validate(settings)
