"""Web API routes."""

from .api import router as api_router
from .stops import router as stops_router
from .transit import router as transit_router

__all__ = [
    "api_router",
    "stops_router",
    "transit_router",
]
