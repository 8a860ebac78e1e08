"""
Tests for configuration
"""
import logging

import pytest

from schedule_resolver.utils.config import (
    CalendarConfig,
    ResolverConfig,
    Config,
    ConfigDefaults,
    get_timezone,
    load_config,
    _replace_env_vars,
)
from schedule_resolver.utils.logger import configure_logging


class TestConfig:
    """Test configuration loading and management"""

    def test_replace_env_vars(self, monkeypatch):
        """Test environment variable replacement"""
        monkeypatch.setenv("TEST_VAR", "test_value")

        obj = {
            "key1": "${TEST_VAR}",
            "key2": "normal_value",
            "nested": {
                "key3": "${TEST_VAR}"
            }
        }

        result = _replace_env_vars(obj)
        assert result["key1"] == "test_value"
        assert result["key2"] == "normal_value"
        assert result["nested"]["key3"] == "test_value"

    def test_replace_env_vars_list(self, monkeypatch):
        """Test environment variable replacement in lists"""
        monkeypatch.setenv("TEST_VAR", "test_value")

        obj = ["${TEST_VAR}", "normal", {"key": "${TEST_VAR}"}]
        result = _replace_env_vars(obj)

        assert result[0] == "test_value"
        assert result[1] == "normal"
        assert result[2]["key"] == "test_value"

    def test_unset_var_left_alone(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert _replace_env_vars("${NOT_SET_ANYWHERE}") == "${NOT_SET_ANYWHERE}"

    def test_unset_timezone_gets_default(self):
        assert _replace_env_vars("${TIMEZONE}") == ConfigDefaults.TIMEZONE_DEFAULT

    def test_defaults(self):
        """Every section has usable defaults"""
        config = Config()

        assert config.calendar.timezone == "Europe/Berlin"
        assert config.calendar.default_duration_minutes == 60
        assert config.resolver.fallback_date is None
        assert config.resolver.min_year == 2020
        assert config.resolver.max_year == 2030
        assert config.resolver.malformed_corrections == {"20-17": 17, "25-17": 17}
        assert config.logging.level == "INFO"

    def test_correction_keys_normalized(self):
        config = Config(resolver=ResolverConfig(malformed_corrections={"20-07": 7, " 05 - 17 ": 17}))
        assert config.resolver.malformed_corrections == {"20-7": 7, "5-17": 17}

    @pytest.mark.parametrize("key", ["20", "a-b", "1-2-3"])
    def test_bad_correction_key_rejected(self, key):
        with pytest.raises(ValueError):
            ResolverConfig(malformed_corrections={key: 1})

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValueError):
            CalendarConfig(timezone="Europe/Berln")

    def test_defaults_not_shared(self):
        first = Config()
        first.resolver.malformed_corrections["01-02"] = 1
        assert "01-02" not in Config().resolver.malformed_corrections


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the default level and handlers back after load_config changed them"""
    yield
    configure_logging()


class TestLoadConfig:
    """Test YAML loading"""

    def test_missing_file(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == Config()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == Config()

    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Asia/Tokyo")
        path = tmp_path / "config.yaml"
        path.write_text(
            "calendar:\n"
            "  timezone: \"${TIMEZONE}\"\n"
            "  default_duration_minutes: 30\n"
            "resolver:\n"
            "  fallback_date: \"2025-01-01\"\n"
            "  malformed_corrections:\n"
            "    \"31-12\": 1\n"
        )

        config = load_config(str(path))

        assert config.calendar.timezone == "Asia/Tokyo"
        assert config.calendar.default_duration_minutes == 30
        assert config.resolver.fallback_date == "2025-01-01"
        assert config.resolver.malformed_corrections == {"31-12": 1}
        assert config.resolver.max_year == 2030

    def test_logging_section_applied(self, tmp_path):
        log_file = tmp_path / "logs" / "resolver.log"
        path = tmp_path / "config.yaml"
        path.write_text(f"logging:\n  level: \"WARNING\"\n  file: \"{log_file}\"\n")

        load_config(str(path))

        assert logging.getLogger().level == logging.WARNING
        assert log_file.exists()

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("calendar:\n  default_duration_minutes: forever\n")

        with pytest.raises(ValueError):
            load_config(str(path))


class TestGetTimezone:
    """Test timezone resolution order"""

    def test_unknown_env_zone_rejected(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Mars/Olympus")
        with pytest.raises(ValueError):
            get_timezone(Config())

    def test_env_wins(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "UTC")
        assert get_timezone(Config()) == "UTC"

    def test_config_value(self):
        config = Config()
        config.calendar.timezone = "America/New_York"
        assert get_timezone(config) == "America/New_York"

    def test_default(self):
        assert get_timezone() == "Europe/Berlin"
