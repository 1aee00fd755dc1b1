"""Unit tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from fasting_app.config.defaults import TrackerConfig, get_default_config
from fasting_app.config.loader import ConfigLoader
from fasting_app.config.validation import ConfigValidator, ValidationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()
        assert isinstance(config, TrackerConfig)
        assert config.session.default_plan == "16:8"
        assert config.session.allow_restart is True
        assert config.history.max_entries == 200
        assert config.stats.chart_days == 14
        assert config.stats.streak_scan_days == 365
        assert config.clock.tick_interval_seconds == 1.0
        assert config.storage.state_key == "migtoonz-fasting-tracker-v1"

    def test_defaults_are_frozen(self) -> None:
        config = get_default_config()
        with pytest.raises(AttributeError):
            config.history.max_entries = 5


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_bundled_config_file_is_valid(self) -> None:
        config = ConfigLoader.create().load()
        assert config.session.default_plan == "16:8"

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        assert loader.load_file_config() == {}
        assert loader.load() == get_default_config()

    def test_empty_file(self, tmp_path) -> None:
        (tmp_path / "tracker.yaml").write_text("")
        assert ConfigLoader.create(tmp_path).load_file_config() == {}

    def test_non_mapping_file_rejected(self, tmp_path) -> None:
        (tmp_path / "tracker.yaml").write_text("- 16:8\n")
        with pytest.raises(ValueError, match="mapping of sections"):
            ConfigLoader.create(tmp_path).load_file_config()

    def test_syntax_error_propagates(self, tmp_path) -> None:
        (tmp_path / "tracker.yaml").write_text("session: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            ConfigLoader.create(tmp_path).load()

    def test_three_tier_precedence(self, tmp_path) -> None:
        (tmp_path / "tracker.yaml").write_text(yaml.safe_dump({
            "session": {"default_plan": "18:6"},
            "history": {"max_entries": 50},
        }))
        loader = ConfigLoader.create(tmp_path)

        config = loader.load({"history": {"max_entries": 10}})

        assert config.session.default_plan == "18:6"
        assert config.session.allow_restart is True
        assert config.history.max_entries == 10
        assert config.stats.chart_days == 14

    def test_merge_config_returns_dict(self, tmp_path) -> None:
        merged = ConfigLoader.create(tmp_path).merge_config({"clock": {"tick_interval_seconds": 0.5}})
        assert merged["clock"]["tick_interval_seconds"] == 0.5
        assert merged["storage"]["db_path"] == "fasting_tracker.db"

    def test_invalid_values_rejected(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        with pytest.raises(ValueError) as exc_info:
            loader.load({"history": {"max_entries": 0}, "messages": {"format": "xml"}})

        assert "max_entries" in str(exc_info.value)
        assert "format" in str(exc_info.value)

    def test_unknown_keys_ignored(self, tmp_path) -> None:
        config = ConfigLoader.create(tmp_path).load({"session": {"colour": "blue"}})
        assert config.session == get_default_config().session


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self, tmp_path) -> None:
        merged = ConfigLoader.create(tmp_path).merge_config()
        assert ConfigValidator.validate_config(merged) == []

    @pytest.mark.parametrize("value", [0, -1, 2.5, True, "200"])
    def test_history_limit_must_be_positive_int(self, value) -> None:
        errors = ConfigValidator.validate_history_params({"max_entries": value})
        assert errors == [ValidationError(
            field="max_entries", message="Must be a positive integer", value=value
        )]

    def test_session_params(self) -> None:
        errors = ConfigValidator.validate_session_params({"default_plan": " ", "allow_restart": "no"})
        assert [error.field for error in errors] == ["default_plan", "allow_restart"]

    def test_tick_interval(self) -> None:
        assert ConfigValidator.validate_clock_params({"tick_interval_seconds": 0.25}) == []
        assert len(ConfigValidator.validate_clock_params({"tick_interval_seconds": 0})) == 1
        assert len(ConfigValidator.validate_clock_params({"tick_interval_seconds": False})) == 1

    def test_logging_level_case_insensitive(self) -> None:
        assert ConfigValidator.validate_logging_params({"level": "debug"}) == []
        assert len(ConfigValidator.validate_logging_params({"level": "LOUD"})) == 1

    def test_storage_and_export_paths(self) -> None:
        assert len(ConfigValidator.validate_storage_params({"db_path": ""})) == 1
        assert len(ConfigValidator.validate_export_params({"output_dir": None})) == 1
        assert len(ConfigValidator.validate_notification_params({"command": ""})) == 1

    def test_section_must_be_mapping(self) -> None:
        errors = ConfigValidator.validate_config({"stats": [1, 2]})
        assert errors[0].field == "stats"
        assert errors[0].message == "Must be a mapping"
