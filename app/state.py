"""Explicit application state for Nightscout Tray.

Holds the one piece of runtime configuration the refresh pipeline reads:
the Nightscout base URL. It is created once at startup and only changed
through ``set_base_url``.
"""
from config import get_logger
from nightscout.client import normalize_base_url

logger = get_logger(__name__)


class AppState:
    """Process-wide state shared by the controller and the settings channel.

    Attributes:
        base_url: Current service base URL, without trailing slash.
    """

    def __init__(self, base_url: str):
        self._base_url = normalize_base_url(base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_base_url(self, url: str) -> bool:
        """Replace the base URL.

        Returns:
            True if the value changed.

        Raises:
            ConfigurationError: If url is invalid; the old value is kept.
        """
        url = normalize_base_url(url)
        if url == self._base_url:
            return False
        old, self._base_url = self._base_url, url
        logger.info(f"Base URL changed: {old} -> {url}")
        return True
