"""Configuration module for Nightscout Tray.

Provides centralized configuration, logging, and exceptions.
"""
from config.constants import (
    ASSETS,
    COLORS,
    INTERVALS,
    NIGHTSCOUT,
    STORAGE,
    UI,
    AssetsConfig,
    Colors,
    Intervals,
    NightscoutConfig,
    StorageConfig,
    UIConfig,
)
from config.exceptions import (
    ConfigurationError,
    FetchError,
    MissingDataError,
    NightscoutTrayError,
    RenderError,
    UnsupportedPlatformError,
)
from config.logging_config import LogContext, get_logger, log_exception, setup_logging

__all__ = [
    # Constants
    "ASSETS",
    "COLORS",
    "INTERVALS",
    "NIGHTSCOUT",
    "STORAGE",
    "UI",
    "AssetsConfig",
    "Colors",
    "Intervals",
    "NightscoutConfig",
    "StorageConfig",
    "UIConfig",
    # Exceptions
    "NightscoutTrayError",
    "FetchError",
    "MissingDataError",
    "RenderError",
    "UnsupportedPlatformError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_exception",
    "LogContext",
]
