"""Transit data types shared by the client, board and web layers."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Departure:
    """One predicted departure from a stop.

    Attributes:
        route: Short route name shown on the board (e.g. "7E")
        headsign: Direction text
        minutes_until: Whole minutes until departure (may be <= 0)
        display_time: "MOST" when departing, otherwise "<n> perc"
        trip_id: FUTÁR trip id, if known
        vehicle_type: FUTÁR route type (BUS, TRAM, ...)
        is_night_bus: True for night services
        departure_time: Unix seconds used for the prediction
    """

    route: str
    headsign: str
    minutes_until: int
    display_time: str
    trip_id: str | None = None
    vehicle_type: str = "UNDEFINED"
    is_night_bus: bool = False
    departure_time: int | None = None

    @property
    def is_arriving(self) -> bool:
        return self.minutes_until <= 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["is_arriving"] = self.is_arriving
        return data


@dataclass(frozen=True)
class VehiclePosition:
    """A vehicle reported by the real-time feed."""

    vehicle_id: str
    latitude: float
    longitude: float
    route_id: str | None = None
    route: str | None = None
    bearing: float | None = None
    label: str | None = None
    vehicle_type: str | None = None
    last_update: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Stop:
    """A row of the GTFS stops table."""

    stop_id: str
    name: str
    latitude: float | None = None
    longitude: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
