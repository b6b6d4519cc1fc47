"""Pydantic schemas for API responses.

Provides type-safe response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    success: bool
    message: str = ""
    data: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = False
    error: str
    detail: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class MatrixResponse(BaseModel):
    """Dot-matrix rendering of a text."""

    text: str
    normalized: str
    width: int
    height: int
    matrix: list[list[int]]


class StopInfo(BaseModel):
    stop_id: str
    name: str
    latitude: float | None = None
    longitude: float | None = None


class NearbyStop(StopInfo):
    distance_m: float


class StopsResponse(BaseModel):
    stops: list[StopInfo]


class NearbyStopsResponse(BaseModel):
    stops: list[NearbyStop]


class DepartureInfo(BaseModel):
    route: str
    headsign: str
    minutes_until: int
    display_time: str
    trip_id: str | None = None
    vehicle_type: str
    is_night_bus: bool
    is_arriving: bool
    departure_time: int | None = None


class DeparturesResponse(BaseModel):
    stop_id: str
    stop_name: str
    departures: list[DepartureInfo]


class BoardLineInfo(BaseModel):
    text: str
    arriving: bool
    matrix: list[list[int]]


class BoardResponse(BaseModel):
    """Laid-out board for the web display."""

    stop_id: str
    stop_name: str
    updated_at: str | None = None
    error: str | None = None
    lines: list[BoardLineInfo]


class VehicleInfo(BaseModel):
    vehicle_id: str
    latitude: float
    longitude: float
    route_id: str | None = None
    route: str | None = None
    bearing: float | None = None
    label: str | None = None
    vehicle_type: str | None = None
    last_update: int | None = None


class VehiclesResponse(BaseModel):
    vehicles: list[VehicleInfo]
