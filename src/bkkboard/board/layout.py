"""Fixed-width line layout for the departure board.

Each board line is ``ROUTE DIRECTION TIME``: a 4 character route column,
a direction column whose width depends on the viewport, and a 3 character
right-aligned minutes column.
"""

import math
from dataclasses import dataclass

from ..transit.models import Departure

ROUTE_WIDTH = 4
TIME_WIDTH = 3
EMPTY_BOARD_TEXT = "NINCS JARAT"
DEFAULT_DIRECTION = "Kozpont"

# Approximate on-screen width of one character (glyph plus gap) in CSS px.
CHAR_FULL_WIDTH = 3.8
PAGE_PADDING = 70

MIN_DIRECTION_CHARS = 6
MAX_DIRECTION_CHARS = 20

# (max viewport width, direction cap) for phone-sized screens.
_DIRECTION_CAPS = (
    (390, 9),
    (428, 10),
    (440, 12),
)
_WIDE_SCREEN_CAP = 16


def direction_budget(viewport_width: int) -> int:
    """Characters available for the direction column at ``viewport_width`` px."""
    route_px = (ROUTE_WIDTH + 1) * CHAR_FULL_WIDTH
    time_px = (TIME_WIDTH + 1) * CHAR_FULL_WIDTH
    available = viewport_width - PAGE_PADDING - route_px - time_px
    max_chars = math.floor(available / CHAR_FULL_WIDTH)

    cap = _WIDE_SCREEN_CAP
    for max_width, width_cap in _DIRECTION_CAPS:
        if viewport_width <= max_width:
            cap = width_cap
            break
    max_chars = min(max_chars, cap)

    return max(MIN_DIRECTION_CHARS, min(MAX_DIRECTION_CHARS, max_chars))


def format_minutes(minutes: int) -> str:
    return "0'" if minutes <= 0 else f"{minutes}'"


def format_line(route: str, direction: str, minutes: int, direction_width: int) -> str:
    """Build one board line; the route is padded but never cut."""
    route_column = route.ljust(ROUTE_WIDTH)
    direction_column = (direction or DEFAULT_DIRECTION)[:direction_width].ljust(direction_width)
    time_column = format_minutes(minutes).rjust(TIME_WIDTH)
    return f"{route_column} {direction_column} {time_column}"


@dataclass(frozen=True)
class BoardLine:
    """A laid-out board line."""

    text: str
    arriving: bool = False


def layout_departures(
    departures: list[Departure],
    viewport_width: int,
    max_lines: int = 6,
) -> list[BoardLine]:
    """Lay out up to ``max_lines`` departures, or the empty-board message."""
    if not departures:
        return [BoardLine(EMPTY_BOARD_TEXT)]

    width = direction_budget(viewport_width)
    return [
        BoardLine(
            text=format_line(d.route, d.headsign, d.minutes_until, width),
            arriving=d.is_arriving,
        )
        for d in departures[:max_lines]
    ]
