"""BKK dot-matrix departure board.

A small transit display service featuring:
- Real-time departures and vehicle positions from the BKK FUTÁR API
- A 5x7 dot-matrix text renderer with Hungarian glyphs
- Stop search against a local GTFS stops.txt
- Web board and REST API
"""

__version__ = "1.0.0"
