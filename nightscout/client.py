"""HTTP client for the Nightscout properties endpoint.

Fetches ``{base_url}/api/v2/properties`` and returns the parsed JSON
object. Every failure surfaces as a FetchError; retrying is left to the
refresh scheduler.
"""

import json
import socket
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from config import INTERVALS, NIGHTSCOUT, ConfigurationError, FetchError, get_logger

logger = get_logger(__name__)


def normalize_base_url(base_url: Optional[str]) -> str:
    """Validate a service base URL and strip trailing slashes.

    Args:
        base_url: URL such as "https://my-site.herokuapp.com/".

    Returns:
        The URL without trailing slashes.

    Raises:
        ConfigurationError: If the URL is empty or not http(s).
    """
    value = (base_url or "").strip()
    if not value:
        raise ConfigurationError("Nightscout base URL is empty")

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError("Nightscout base URL must be http(s)", {"value": value})

    return value.rstrip("/")


def build_properties_url(base_url: str) -> str:
    """Build the properties endpoint URL for a base URL."""
    return normalize_base_url(base_url) + NIGHTSCOUT.PROPERTIES_PATH


class NightscoutClient:
    """Fetches remote glucose properties from a Nightscout site.

    The client holds no base URL of its own; the caller passes the current
    value on every fetch so settings changes apply on the next cycle.
    """

    def __init__(self, timeout: float = INTERVALS.FETCH_TIMEOUT_SECONDS,
                 user_agent: str = NIGHTSCOUT.USER_AGENT):
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch_properties(self, base_url: str) -> dict:
        """Fetch and parse the properties payload.

        Args:
            base_url: Service base URL, e.g. "https://ns.example.com".

        Returns:
            The decoded JSON object.

        Raises:
            ConfigurationError: If the base URL is invalid.
            FetchError: On network, HTTP, or decoding failure.
        """
        url = build_properties_url(base_url)
        request = Request(url, headers={
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        })

        logger.debug(f"GET {url}")
        try:
            with urlopen(request, timeout=self.timeout) as response:
                body = response.read()
        except HTTPError as e:
            raise FetchError(f"HTTP {e.code} from Nightscout", {"url": url}) from e
        except (URLError, socket.timeout, OSError) as e:
            reason = getattr(e, "reason", e)
            raise FetchError(f"Could not reach Nightscout: {reason}", {"url": url}) from e

        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise FetchError(f"Malformed JSON from Nightscout: {e}", {"url": url}) from e

        if not isinstance(data, dict):
            raise FetchError("Unexpected properties payload", {
                "url": url,
                "type": type(data).__name__,
            })

        return data
