"""Custom exception hierarchy for Nightscout Tray.

Each stage of the refresh pipeline raises its own exception type so the
controller can decide which failures are logged and which are silent.
"""

from typing import Optional


class NightscoutTrayError(Exception):
    """Base exception for all Nightscout Tray errors.

    All custom exceptions in this application should inherit from this class.
    This allows catching all application-specific errors with a single except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class FetchError(NightscoutTrayError):
    """Remote reading could not be fetched.

    Raised when there are issues with:
    - Network failures and timeouts
    - HTTP error status codes
    - Response bodies that are not a JSON object

    Examples:
        >>> raise FetchError("Request timed out", {"url": "https://ns.example/api/v2/properties"})
    """

    pass


class MissingDataError(NightscoutTrayError):
    """The response was valid but carried no scaled glucose reading.

    This is an expected state (sensor warm-up, gaps in data) and is never
    logged as an error.
    """

    pass


class RenderError(NightscoutTrayError):
    """Tray icon rendering errors.

    Raised when there are issues with:
    - Loading the bitmap font
    - Drawing text onto the canvas
    - Writing the icon file

    Examples:
        >>> raise RenderError("Could not write icon", {"path": "/tmp/glucose.png"})
    """

    pass


class UnsupportedPlatformError(NightscoutTrayError):
    """The running platform has no known tray presentation."""

    pass


class ConfigurationError(NightscoutTrayError):
    """Settings and configuration errors.

    Raised when there are issues with:
    - Empty or malformed service base URL
    - Settings file parsing

    Examples:
        >>> raise ConfigurationError("Invalid base URL", {"value": "ftp://x"})
    """

    pass
