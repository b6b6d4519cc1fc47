"""Transit data access.

Provides:
- TransitClient for the BKK FUTÁR real-time API
- MockTransitClient for offline use
- StopDirectory over GTFS stops.txt
"""

from ..core.config import TransitConfig
from .client import TransitClient
from .mock import MockTransitClient
from .models import Departure, Stop, VehiclePosition
from .stops import StopDirectory

__all__ = [
    "TransitClient",
    "MockTransitClient",
    "Departure",
    "Stop",
    "VehiclePosition",
    "StopDirectory",
    "create_client",
]


def create_client(config: TransitConfig) -> "TransitClient | MockTransitClient":
    """Real client when an API key is configured, mock otherwise."""
    if config.use_mock:
        return MockTransitClient(minutes_after=config.minutes_after)
    return TransitClient(config)
