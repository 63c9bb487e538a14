"""Trend direction codes reported by Nightscout.

Maps each machine-readable direction code to the arrow glyph Nightscout
uses for its label and to the geometry used when drawing an arrow icon.
"""
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Direction:
    """A single trend direction.

    Attributes:
        code: Machine code, e.g. "FortyFiveUp". Used as the icon asset key.
        label: Human-readable glyph, e.g. "↗".
        angle: Arrow angle in degrees (0 = flat/right, 90 = straight up),
            or None when no arrow is drawn.
        count: Number of parallel arrows (2 for DoubleUp).
    """
    code: str
    label: str
    angle: Optional[int] = None
    count: int = 1


NONE_CODE = "NONE"

DIRECTIONS: Dict[str, Direction] = {
    d.code: d
    for d in (
        Direction("NONE", "⇼"),
        Direction("TripleUp", "⤊", 90, 3),
        Direction("DoubleUp", "⇈", 90, 2),
        Direction("SingleUp", "↑", 90),
        Direction("FortyFiveUp", "↗", 45),
        Direction("Flat", "→", 0),
        Direction("FortyFiveDown", "↘", -45),
        Direction("SingleDown", "↓", -90),
        Direction("DoubleDown", "⇊", -90, 2),
        Direction("TripleDown", "⤋", -90, 3),
        Direction("NOT COMPUTABLE", "-"),
        Direction("RATE OUT OF RANGE", "⇕"),
    )
}


def get_direction(code: Optional[str]) -> Direction:
    """Look up a direction, falling back to NONE for unknown codes."""
    return DIRECTIONS.get(code or NONE_CODE, DIRECTIONS[NONE_CODE])


def is_known_direction(code: Optional[str]) -> bool:
    return code in DIRECTIONS
