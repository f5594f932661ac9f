"""
Direction extraction from scene descriptions.

The vision provider is prompted to describe object positions with clock
positions ("Chair at 9 o'clock, 5 feet on your left"). This module turns
those phrases into a single horizontal pan value:

- 2, 3 or 4 o'clock   -> +0.6 (right)
- 8, 9 or 10 o'clock  -> -0.6 (left)
- anything else       ->  0.0 (center)

Right cues are checked first, so a description mentioning both sides pans
right. Everything here is pure: no I/O, no logging, never raises.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

RIGHT_PAN = 0.6
LEFT_PAN = -0.6
CENTER_PAN = 0.0

_RIGHT_CUE = re.compile(r"\b(2|3|4) o'clock\b", re.IGNORECASE)
_LEFT_CUE = re.compile(r"\b(8|9|10) o'clock\b", re.IGNORECASE)
_ANY_CLOCK = re.compile(r"\b(1[0-2]|[1-9]) o'clock\b", re.IGNORECASE)


class Direction(str, Enum):
    """Horizontal side a description points to."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def pan(self) -> float:
        if self is Direction.RIGHT:
            return RIGHT_PAN
        if self is Direction.LEFT:
            return LEFT_PAN
        return CENTER_PAN


def _as_text(text: Optional[str]) -> str:
    return text if isinstance(text, str) else ""


def infer_direction(text: Optional[str]) -> Direction:
    """Classify a description as pointing left, right or straight ahead."""
    text = _as_text(text)
    if _RIGHT_CUE.search(text):
        return Direction.RIGHT
    if _LEFT_CUE.search(text):
        return Direction.LEFT
    return Direction.CENTER


def extract_pan(text: Optional[str]) -> float:
    """Return the stereo pan in [-1.0, 1.0] implied by a scene description."""
    return infer_direction(text).pan


def clock_positions(text: Optional[str]) -> List[int]:
    """
    List every clock position mentioned in the text, in reading order.

    Used for diagnostics only; the pan policy above does not look at it.
    """
    return [int(m.group(1)) for m in _ANY_CLOCK.finditer(_as_text(text))]
