"""Departure, board and vehicle API routes."""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response

from ...board.board import DepartureBoard
from ...board.poller import BoardPoller
from ...display.renderer import image_to_png
from ...transit.departures import normalize_stop_id
from ...transit.stops import StopDirectory
from ..schemas import (
    BoardResponse,
    DepartureInfo,
    DeparturesResponse,
    VehicleInfo,
    VehiclesResponse,
)
from .api import get_client, get_poller, get_stops

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["transit"])


# Viewport widths outside this range are clamped, not rejected.
MIN_VIEWPORT = 200
MAX_VIEWPORT = 3840


def _viewport(width: int | None) -> int | None:
    if width is None:
        return None
    return max(MIN_VIEWPORT, min(MAX_VIEWPORT, width))


async def _board_for(request: Request, stop_id: str) -> DepartureBoard:
    """Board for a stop, created and filled on first request.

    A new board joins the poller only once its first refresh succeeds, so
    unknown or failing stop ids are never polled.
    """
    poller: BoardPoller = get_poller(request)
    full_stop_id = normalize_stop_id(stop_id)

    board = poller.get_board(full_stop_id)
    if board is not None:
        if board.last_update is None and board.last_error is None:
            await board.refresh()
        return board

    board = DepartureBoard(
        full_stop_id,
        get_client(request),
        get_stops(request),
        request.app.state.board_settings,
    )
    await board.refresh()
    if board.last_error is None:
        board = poller.add_board(board)
    return board


@router.get("/departures/{stop_id}")
async def get_departures(
    stop_id: str,
    client=Depends(get_client),
    stops: StopDirectory = Depends(get_stops),
) -> DeparturesResponse:
    """Live departures for a stop, straight from the API."""
    full_stop_id = normalize_stop_id(stop_id)
    departures = await client.get_departures(full_stop_id)
    return DeparturesResponse(
        stop_id=full_stop_id,
        stop_name=stops.get_stop_name(full_stop_id),
        departures=[DepartureInfo(**d.to_dict()) for d in departures],
    )


@router.get("/board/{stop_id}.png")
async def get_board_png(
    request: Request,
    stop_id: str,
    width: int | None = Query(None, ge=1),
) -> Response:
    """The board rendered as a PNG image."""
    board = await _board_for(request, stop_id)
    return Response(content=image_to_png(board.render(_viewport(width))), media_type="image/png")


@router.get("/board/{stop_id}")
async def get_board(
    request: Request,
    stop_id: str,
    width: int | None = Query(None, ge=1),
) -> BoardResponse:
    """Laid-out board lines with their dot matrices."""
    board = await _board_for(request, stop_id)
    return BoardResponse(**board.snapshot(_viewport(width)))


@router.get("/vehicles")
async def get_vehicles(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: int | None = Query(None, ge=50, le=20000),
    client=Depends(get_client),
) -> VehiclesResponse:
    """Vehicles near a coordinate."""
    vehicles = await client.get_vehicles(lat, lon, radius)
    return VehiclesResponse(vehicles=[VehicleInfo(**v.to_dict()) for v in vehicles])
