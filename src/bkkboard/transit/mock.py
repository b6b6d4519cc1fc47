"""Offline stand-in for the FUTÁR client.

Used when no API key is configured so the board and web UI can be
exercised without network access.
"""

import logging
import time

from .departures import format_display_time, normalize_stop_id
from .models import Departure, VehiclePosition

logger = logging.getLogger(__name__)

# (route, headsign, minutes from now, vehicle type, night)
_SAMPLE_DEPARTURES = [
    ("7", "Újpalota, Nyírpalota út", 0, "BUS", False),
    ("4", "Széll Kálmán tér", 2, "TRAM", False),
    ("M2", "Örs vezér tere", 3, "SUBWAY", False),
    ("133E", "Nagytétény, Erdélyi utca", 6, "BUS", False),
    ("6", "Móricz Zsigmond körtér", 9, "TRAM", False),
    ("907", "Bosnyák tér", 14, "BUS", True),
    ("28", "Izraelita temető", 21, "TRAM", False),
]

_SAMPLE_VEHICLES = [
    ("BKK_V1", "7", 47.4979, 19.0402, 90.0),
    ("BKK_V2", "4", 47.5011, 19.0531, 180.0),
    ("BKK_V3", "6", 47.4925, 19.0580, 0.0),
]


class MockTransitClient:
    """Same interface as ``TransitClient``, canned data."""

    def __init__(self, minutes_after: int = 60) -> None:
        self._minutes_after = minutes_after
        logger.info("Using mock transit data")

    async def get_departures(self, stop_id: str, now: float | None = None) -> list[Departure]:
        normalize_stop_id(stop_id)
        now = time.time() if now is None else now
        return [
            Departure(
                route=route,
                headsign=headsign,
                minutes_until=minutes,
                display_time=format_display_time(minutes),
                trip_id=f"BKK_MOCK_{index}",
                vehicle_type=vehicle_type,
                is_night_bus=night,
                departure_time=int(now + minutes * 60),
            )
            for index, (route, headsign, minutes, vehicle_type, night) in enumerate(
                _SAMPLE_DEPARTURES
            )
            if minutes <= self._minutes_after
        ]

    async def get_vehicles(
        self,
        lat: float,
        lon: float,
        radius: int | None = None,
    ) -> list[VehiclePosition]:
        return [
            VehiclePosition(
                vehicle_id=vehicle_id,
                latitude=v_lat,
                longitude=v_lon,
                route_id=f"BKK_{route}",
                route=route,
                bearing=bearing,
            )
            for vehicle_id, route, v_lat, v_lon, bearing in _SAMPLE_VEHICLES
        ]
