"""Departure board module.

Provides:
- Fixed-width line layout
- DepartureBoard state and rendering for one stop
- BoardPoller background refresh
"""

from .board import DepartureBoard
from .layout import BoardLine, direction_budget, format_line, layout_departures
from .poller import BoardPoller

__all__ = [
    "DepartureBoard",
    "BoardLine",
    "direction_budget",
    "format_line",
    "layout_departures",
    "BoardPoller",
]
