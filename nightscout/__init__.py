"""Nightscout service components.

Modules:
    client: HTTP fetch of the properties endpoint
    display: Mapping of a properties payload to a DisplayModel
    directions: Trend direction codes and arrow glyphs

Example:
    >>> from nightscout import NightscoutClient, map_properties
    >>> props = NightscoutClient().fetch_properties("https://ns.example.com")
    >>> model = map_properties(props)
"""
from .client import NightscoutClient, build_properties_url, normalize_base_url
from .directions import DIRECTIONS, Direction, get_direction
from .display import DisplayModel, map_properties, require_display_model, split_delta

__all__ = [
    "NightscoutClient",
    "build_properties_url",
    "normalize_base_url",
    "DIRECTIONS",
    "Direction",
    "get_direction",
    "DisplayModel",
    "map_properties",
    "require_display_model",
    "split_delta",
]
