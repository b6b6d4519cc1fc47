"""Parsing of FUTÁR ``vehicles-for-location`` responses."""

import logging
from typing import Any

from ..core.errors import APIError
from .models import VehiclePosition

logger = logging.getLogger(__name__)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _route_name(route_id: str | None, routes: dict[str, Any]) -> str | None:
    route = _mapping(routes.get(route_id)) if route_id else None
    if route and route.get("shortName"):
        return str(route["shortName"])
    return None


def parse_vehicles(payload: dict[str, Any]) -> list[VehiclePosition]:
    """Turn an API response into vehicle positions.

    Entries without a usable location are skipped.

    Raises:
        APIError: If the payload is not a JSON object
    """
    if not isinstance(payload, dict):
        raise APIError("Malformed payload", details={"type": type(payload).__name__})
    if payload.get("status") != "OK":
        logger.warning("Vehicles response status: %s", payload.get("status"))
        return []

    data = _mapping(payload.get("data"))
    entries = data.get("list")
    routes = _mapping(_mapping(data.get("references")).get("routes"))

    vehicles = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        location = _mapping(entry.get("location"))
        try:
            latitude = float(location["lat"])
            longitude = float(location["lon"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping vehicle without location: %s", entry.get("vehicleId"))
            continue

        route_id = entry.get("routeId")
        bearing = entry.get("bearing")
        vehicles.append(
            VehiclePosition(
                vehicle_id=str(entry.get("vehicleId", "")),
                latitude=latitude,
                longitude=longitude,
                route_id=route_id,
                route=_route_name(route_id, routes),
                bearing=float(bearing) if bearing is not None else None,
                label=entry.get("label") or entry.get("licensePlate"),
                vehicle_type=entry.get("vehicleRouteType"),
                last_update=entry.get("lastUpdateTime"),
            )
        )
    return vehicles
