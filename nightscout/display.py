"""Display model derived from a Nightscout properties payload.

Usage:
    from nightscout.display import map_properties

    model = map_properties(props)
    if model is not None:
        presenter.present(model)
"""
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from config import MissingDataError, get_logger
from nightscout.directions import get_direction

logger = get_logger(__name__)

DELTA_OPERATORS = ("+", "-")


def split_delta(delta_display: str) -> Tuple[str, str]:
    """Split a delta string into its sign and its bare magnitude.

    The operator is the leading "+" or "-" (empty for an unsigned delta).
    The magnitude has every "+" and "-" removed.

    >>> split_delta("+2")
    ('+', '2')
    >>> split_delta("-0.3")
    ('-', '0.3')
    >>> split_delta("0")
    ('', '0')
    """
    delta_display = delta_display or ""
    operator = delta_display[0] if delta_display[:1] in DELTA_OPERATORS else ""
    magnitude = delta_display
    for op in DELTA_OPERATORS:
        magnitude = magnitude.replace(op, "")
    return operator, magnitude


@dataclass(frozen=True)
class DisplayModel:
    """What the tray shows for one reading.

    Attributes:
        glucose_value: Scaled glucose reading, already in the user's unit.
        delta_display: Change since the previous reading, e.g. "+2".
        direction_arrow: Trend glyph, e.g. "↗".
        direction_code: Trend key, e.g. "FortyFiveUp".
    """
    glucose_value: str
    delta_display: str
    direction_arrow: str
    direction_code: str

    @property
    def title(self) -> str:
        return f" {self.glucose_value} {self.delta_display} {self.direction_arrow}"

    @property
    def delta_operator(self) -> str:
        return split_delta(self.delta_display)[0]

    @property
    def delta_magnitude(self) -> str:
        return split_delta(self.delta_display)[1]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _block(props: dict, key: str) -> dict:
    value = props.get(key)
    return value if isinstance(value, dict) else {}


def _scaled_reading(props: dict) -> Optional[str]:
    sgvs = _block(props, "bgnow").get("sgvs")
    if not isinstance(sgvs, list) or not sgvs or not isinstance(sgvs[0], dict):
        return None
    scaled = _as_text(sgvs[0].get("scaled")).strip()
    return scaled or None


def map_properties(props: Optional[dict]) -> Optional[DisplayModel]:
    """Map a properties payload to a DisplayModel.

    Returns None when there is no scaled glucose reading; the caller
    should leave the display untouched in that case.
    """
    if not props:
        return None

    scaled = _scaled_reading(props)
    if scaled is None:
        logger.debug("Properties carry no scaled reading, skipping update")
        return None

    delta = _block(props, "delta")
    direction = _block(props, "direction")
    code = _as_text(direction.get("value"))
    arrow = _as_text(direction.get("label")) or get_direction(code).label

    return DisplayModel(
        glucose_value=scaled,
        delta_display=_as_text(delta.get("display")),
        direction_arrow=arrow,
        direction_code=code,
    )


def require_display_model(props: Optional[dict]) -> DisplayModel:
    """Like map_properties, but raise MissingDataError instead of returning None."""
    model = map_properties(props)
    if model is None:
        raise MissingDataError("No scaled glucose reading in properties")
    return model
