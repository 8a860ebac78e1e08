"""
Configuration management
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import pytz
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .logger import configure_logging


# ============================================
# CONFIGURATION DEFAULTS
# ============================================

class ConfigDefaults:
    """Default configuration values as constants"""

    # Calendar defaults
    TIMEZONE_DEFAULT = "Europe/Berlin"
    DEFAULT_DURATION_MINUTES = 60

    # Resolver defaults
    MIN_YEAR = 2020
    MAX_YEAR = 2030
    # Known-bad "DD-DD" inputs -> day of the current month
    MALFORMED_CORRECTIONS = {
        "20-17": 17,
        "25-17": 17,
    }

    # Logging defaults
    LOGGING_LEVEL_INFO = "INFO"
    LOGGING_FILE_DEFAULT = None

    # Config file defaults
    CONFIG_PATH_DEFAULT = "config/config.yaml"


def validate_timezone(name: str) -> str:
    """
    Check that ``name`` is a known IANA zone.

    Raises:
        ValueError: for unknown zones
    """
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {name!r}")
    return name


# ============================================
# CONFIGURATION MODELS
# ============================================

class ResolverConfig(BaseModel):
    """Date expression resolver configuration"""
    fallback_date: Optional[str] = None  # YYYY-MM-DD used for empty input; reference date when unset
    min_year: int = ConfigDefaults.MIN_YEAR
    max_year: int = ConfigDefaults.MAX_YEAR
    malformed_corrections: Dict[str, int] = dict(ConfigDefaults.MALFORMED_CORRECTIONS)

    @field_validator('malformed_corrections')
    @classmethod
    def normalize_correction_keys(cls, v: Dict[str, int]) -> Dict[str, int]:
        """Key by unpadded day numbers so "20-07" matches input "20-7"."""
        normalized = {}
        for key, day in v.items():
            parts = [part.strip() for part in key.split('-')]
            if len(parts) != 2 or not all(part.isdigit() for part in parts):
                raise ValueError(f"Correction key must look like 'DD-DD': {key!r}")
            normalized[f"{int(parts[0])}-{int(parts[1])}"] = day
        return normalized


class CalendarConfig(BaseModel):
    """Calendar window / event configuration"""
    timezone: str = ConfigDefaults.TIMEZONE_DEFAULT
    default_duration_minutes: int = ConfigDefaults.DEFAULT_DURATION_MINUTES

    @field_validator('timezone')
    @classmethod
    def check_timezone(cls, v: str) -> str:
        return validate_timezone(v)


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = ConfigDefaults.LOGGING_LEVEL_INFO
    file: Optional[str] = ConfigDefaults.LOGGING_FILE_DEFAULT


class Config(BaseModel):
    """Main configuration"""
    resolver: ResolverConfig = ResolverConfig()
    calendar: CalendarConfig = CalendarConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(config_path: str = ConfigDefaults.CONFIG_PATH_DEFAULT) -> Config:
    """
    Load configuration from YAML file and environment variables.

    A missing config file is not an error: every section has defaults.
    The logging section is applied as a side effect.
    """
    load_dotenv()

    config_dict: Dict[str, Any] = {}
    if Path(config_path).exists():
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict = _replace_env_vars(config_dict)

    config = Config(**config_dict)
    configure_logging(config.logging.level, config.logging.file)

    return config


def _replace_env_vars(obj: Any) -> Any:
    """
    Recursively replace ${VAR} placeholders with environment variables.
    """
    if isinstance(obj, dict):
        return {k: _replace_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        var_name = obj[2:-1]
        env_value = os.getenv(var_name)
        if env_value:
            return env_value
        if var_name == "TIMEZONE":
            return ConfigDefaults.TIMEZONE_DEFAULT
        return obj
    return obj


def get_timezone(config: Optional[Config] = None) -> str:
    """
    Get timezone from config or environment variable.

    Args:
        config: Optional Config object

    Returns:
        Timezone string (e.g., "Europe/Berlin", "UTC")
        Defaults to "Europe/Berlin" if not configured

    Raises:
        ValueError: if the TIMEZONE environment variable names an unknown zone
    """
    env_tz = os.getenv("TIMEZONE")
    if env_tz:
        return validate_timezone(env_tz)

    if config and config.calendar and config.calendar.timezone:
        return config.calendar.timezone

    return ConfigDefaults.TIMEZONE_DEFAULT
