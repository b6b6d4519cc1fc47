"""Stop search API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ...transit.stops import StopDirectory
from ..schemas import NearbyStop, NearbyStopsResponse, StopInfo, StopsResponse
from .api import get_stops

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stops", tags=["stops"])


@router.get("")
async def search_stops(
    q: str = Query("", max_length=100),
    limit: int = Query(10, ge=1, le=50),
    stops: StopDirectory = Depends(get_stops),
) -> StopsResponse:
    """Search-as-you-type over stop names and ids."""
    return StopsResponse(stops=[StopInfo(**s.to_dict()) for s in stops.search(q, limit)])


@router.get("/nearby")
async def nearby_stops(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    limit: int = Query(5, ge=1, le=50),
    max_distance: float | None = Query(None, gt=0),
    stops: StopDirectory = Depends(get_stops),
) -> NearbyStopsResponse:
    """Closest stops to a coordinate."""
    found = stops.nearest(lat, lon, limit=limit, max_distance_m=max_distance)
    return NearbyStopsResponse(
        stops=[NearbyStop(**stop.to_dict(), distance_m=round(d, 1)) for stop, d in found]
    )


@router.get("/{stop_id}")
async def get_stop(stop_id: str, stops: StopDirectory = Depends(get_stops)) -> StopInfo:
    """Look up a single stop."""
    stop = stops.get(stop_id)
    if stop is None:
        raise HTTPException(status_code=404, detail=f"Unknown stop: {stop_id}")
    return StopInfo(**stop.to_dict())
