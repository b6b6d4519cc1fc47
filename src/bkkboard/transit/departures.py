"""Parsing of FUTÁR ``arrivals-and-departures-for-stop`` responses."""

import logging
import math
import re
import time
from typing import Any

from ..core.errors import APIError, ValidationError
from .models import Departure

logger = logging.getLogger(__name__)

STOP_PREFIX = "BKK_"
DEFAULT_HEADSIGN = "N/A"
NIGHT_ROUTE_COLOR = "000000"
NIGHT_ICON = "night-bus"
NIGHT_GROUP_ID = 6


def normalize_stop_id(stop_id: str) -> str:
    """Return the stop id with the ``BKK_`` agency prefix.

    Raises:
        ValidationError: If the id is empty or contains whitespace/slashes
    """
    stop_id = (stop_id or "").strip()
    if not stop_id or re.search(r"[\s/]", stop_id):
        raise ValidationError("Invalid stop id", details={"stop_id": stop_id})
    return stop_id if stop_id.startswith(STOP_PREFIX) else STOP_PREFIX + stop_id


def strip_stop_prefix(stop_id: str) -> str:
    return stop_id.replace(STOP_PREFIX, "", 1)


def minutes_until(departure_time: float, now: float) -> int:
    """Minutes from ``now`` to ``departure_time`` (both Unix seconds), rounded half up."""
    return math.floor((departure_time - now) / 60 + 0.5)


def route_short_name(
    route: dict[str, Any] | None,
    route_id: str | None,
    trip_id: str | None,
    index: int,
) -> str:
    """Pick the label shown in the route column.

    Falls back from the route's short name to a cleaned route id
    ("BKK_0070" -> "70"), then to the first number in the trip id,
    then to a positional "Járat N".
    """
    if route and route.get("shortName"):
        return str(route["shortName"])
    if route_id:
        bare = route_id.replace(STOP_PREFIX, "", 1)
        return re.sub(r"^0+(\d)", r"\1", bare) or bare
    if trip_id:
        match = re.search(r"\d+", trip_id)
        if match:
            return match.group(0)
    return f"Járat {index + 1}"


def is_night_route(route: dict[str, Any] | None) -> bool:
    if not route:
        return False
    style = route.get("style") or {}
    icon = style.get("vehicleIcon") or {}
    return (
        route.get("color") == NIGHT_ROUTE_COLOR
        or icon.get("name") == NIGHT_ICON
        or style.get("groupId") == NIGHT_GROUP_ID
    )


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def format_display_time(minutes: int) -> str:
    return "MOST" if minutes <= 0 else f"{minutes} perc"


def parse_departures(
    payload: dict[str, Any],
    now: float | None = None,
    window_minutes: int = 60,
) -> list[Departure]:
    """Turn an API response into upcoming departures.

    Departures outside ``0..window_minutes`` are dropped and the rest are
    sorted soonest first. A response without ``status == "OK"`` or without
    stop times yields an empty list. Stop times that are not objects are
    skipped.

    Args:
        payload: Decoded JSON body
        now: Current Unix time in seconds (defaults to the wall clock)
        window_minutes: Look-ahead window

    Raises:
        APIError: If the payload is not a JSON object
    """
    if not isinstance(payload, dict):
        raise APIError("Malformed payload", details={"type": type(payload).__name__})
    if now is None:
        now = time.time()

    if payload.get("status") != "OK":
        logger.warning("Departures response status: %s", payload.get("status"))
        return []

    data = _mapping(payload.get("data"))
    stop_times = _mapping(data.get("entry")).get("stopTimes")
    if not stop_times or not isinstance(stop_times, list):
        return []

    references = _mapping(data.get("references"))
    trips = _mapping(references.get("trips"))
    routes = _mapping(references.get("routes"))

    departures = []
    for index, stop_time in enumerate(stop_times):
        if not isinstance(stop_time, dict):
            logger.debug("Skipping malformed stop time: %r", stop_time)
            continue
        departure_time = stop_time.get("predictedDepartureTime") or stop_time.get("departureTime")
        if not departure_time:
            continue

        trip_id = stop_time.get("tripId")
        route_id = _mapping(trips.get(trip_id)).get("routeId") if trip_id else None
        route = _mapping(routes.get(route_id)) if route_id else None
        minutes = minutes_until(departure_time, now)

        departures.append(
            Departure(
                route=route_short_name(route, route_id, trip_id, index),
                headsign=stop_time.get("stopHeadsign") or DEFAULT_HEADSIGN,
                minutes_until=minutes,
                display_time=format_display_time(minutes),
                trip_id=trip_id,
                vehicle_type=(route or {}).get("type") or "UNDEFINED",
                is_night_bus=is_night_route(route),
                departure_time=int(departure_time),
            )
        )

    upcoming = [d for d in departures if 0 <= d.minutes_until <= window_minutes]
    upcoming.sort(key=lambda d: d.minutes_until)
    return upcoming
