"""Centralized constants and configuration for Nightscout Tray.

This module holds the magic numbers, strings, and paths used by the
refresh pipeline so the rest of the code never hard-codes them.

Usage:
    from config.constants import INTERVALS, NIGHTSCOUT, UI

    refresh_every = INTERVALS.REFRESH_SECONDS
    url = NIGHTSCOUT.DEFAULT_BASE_URL + NIGHTSCOUT.PROPERTIES_PATH
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class Intervals:
    """Time intervals for various operations (in seconds)."""
    # Main refresh loop
    REFRESH_SECONDS: float = 10.0

    # Upper bound on a single HTTP request so a hung server cannot
    # hold the single-flight guard forever
    FETCH_TIMEOUT_SECONDS: float = 30.0

    # Delay between rumps.run() and the first refresh on macOS
    STARTUP_DELAY_SECONDS: float = 0.5


@dataclass(frozen=True)
class StorageConfig:
    """Storage and file-related configuration."""
    DATA_DIR_NAME: str = ".nightscout-tray"
    SETTINGS_FILE: str = "settings.json"
    LOG_FILE: str = "nightscout_tray.log"

    # Rendered tray icons live here, overwritten every cycle
    ICON_DIR: str = "icons"
    GLUCOSE_ICON_FILE: str = "glucose.png"
    DELTA_ICON_FILE: str = "delta.png"
    OPERATOR_ICON_FILE: str = "operator.png"

    # Arrows drawn on the fly when an asset is missing
    ARROW_CACHE_DIR: str = "nstray-arrows"

    # Log rotation
    LOG_MAX_BYTES: int = 5_000_000  # 5MB
    LOG_BACKUP_COUNT: int = 3


@dataclass(frozen=True)
class Colors:
    """Color definitions for tray icons (RGBA tuples for PIL)."""
    ICON_BACKGROUND_RGBA: Tuple[int, int, int, int] = (0, 0, 0, 255)
    ICON_TEXT_RGBA: Tuple[int, int, int, int] = (255, 255, 255, 255)

    # Arrow asset variants
    ARROW_WHITE_RGBA: Tuple[int, int, int, int] = (255, 255, 255, 255)
    ARROW_BLACK_RGBA: Tuple[int, int, int, int] = (0, 0, 0, 255)


@dataclass(frozen=True)
class UIConfig:
    """UI-related configuration."""
    # Tray icon canvas
    ICON_SIZE: int = 16

    # Text box the glyphs are laid out in (one pixel wider than the canvas)
    TEXT_BOX_WIDTH: int = 17
    TEXT_BOX_HEIGHT: int = 16
    TEXT_OFFSET_X: int = -1
    TEXT_OFFSET_Y: int = 0

    # Scalable fonts shrink from FONT_SIZE until the text fits the canvas
    FONT_SIZE: int = 11
    MIN_FONT_SIZE: int = 6

    # Arrow drawing
    ARROW_LINE_WIDTH: int = 2
    ARROW_HEAD_SIZE: int = 4

    # Title shown before the first reading arrives
    PLACEHOLDER_TITLE: str = "--"


@dataclass(frozen=True)
class NightscoutConfig:
    """Remote service configuration."""
    DEFAULT_BASE_URL: str = "https://maigaard.herokuapp.com"
    PROPERTIES_PATH: str = "/api/v2/properties"

    # Key used by settings-update messages
    SETTINGS_KEY: str = "nightscoutUrl"

    # Environment override for the base URL at startup
    URL_ENV_VAR: str = "NIGHTSCOUT_URL"

    USER_AGENT: str = "NightscoutTray/1.0"


@dataclass(frozen=True)
class AssetsConfig:
    """Bundled asset locations."""
    ASSETS_DIR: Path = Path(__file__).resolve().parent.parent / "assets"
    ARROW_DIR_NAME: str = "arrows"
    ARROW_FILE_PATTERN: str = "16x16_{code}_{variant}.ico"
    DEFAULT_ARROW_VARIANT: str = "white"

    # Optional PIL bitmap font; Pillow's built-in font is used when absent
    FONT_FILE: str = "fonts/tahoma.pil"

    @property
    def arrow_dir(self) -> Path:
        return self.ASSETS_DIR / self.ARROW_DIR_NAME

    @property
    def font_path(self) -> Path:
        return self.ASSETS_DIR / self.FONT_FILE


# Global instances - import these
INTERVALS = Intervals()
STORAGE = StorageConfig()
COLORS = Colors()
UI = UIConfig()
NIGHTSCOUT = NightscoutConfig()
ASSETS = AssetsConfig()
