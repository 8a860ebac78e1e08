"""
Utility modules - Shared utilities for the application

This module should NEVER import from ``schedule_resolver.core`` to keep the
import hierarchy one-directional.
"""

# ============================================
# CONFIGURATION
# ============================================
from .config import Config, ConfigDefaults, load_config, get_timezone

# ============================================
# LOGGING
# ============================================
from .logger import configure_logging, setup_logger

__all__ = [
    "Config",
    "ConfigDefaults",
    "load_config",
    "get_timezone",
    "configure_logging",
    "setup_logger",
]
