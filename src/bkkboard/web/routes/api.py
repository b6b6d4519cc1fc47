"""Core API routes.

Provides health checks, dot-matrix rendering and the shared dependencies
the other routers use.
"""

import logging
import time

from fastapi import APIRouter, Query, Request

from ...board.poller import BoardPoller
from ...display.dotmatrix import create_dot_matrix_text, matrix_width
from ...display.font import GLYPH_HEIGHT, normalize_text
from ...transit.stops import StopDirectory
from ..schemas import APIResponse, MatrixResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

_start_time = time.time()


def get_client(request: Request):
    """Transit client (real or mock) from app state."""
    return request.app.state.client


def get_stops(request: Request) -> StopDirectory:
    return request.app.state.stops


def get_poller(request: Request) -> BoardPoller:
    return request.app.state.poller


@router.get("/health")
async def health_check(request: Request) -> APIResponse:
    """Health check endpoint."""
    poller = get_poller(request)
    return APIResponse(
        success=True,
        message="OK",
        data={
            "uptime": round(time.time() - _start_time, 1),
            "mock": request.app.state.mock,
            "poller_running": poller.is_running,
            "boards": [board.stop_id for board in poller.boards()],
        },
    )


@router.get("/matrix")
async def render_matrix(text: str = Query("", max_length=200)) -> MatrixResponse:
    """Render arbitrary text as a dot-matrix bit grid."""
    matrix = create_dot_matrix_text(text)
    return MatrixResponse(
        text=text,
        normalized=normalize_text(text),
        width=matrix_width(matrix),
        height=GLYPH_HEIGHT,
        matrix=matrix,
    )
