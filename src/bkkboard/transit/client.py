"""BKK FUTÁR real-time API client.

Wraps the two endpoints the board needs (stop departures and vehicles
near a point) with error mapping and retry.
"""

import logging
from typing import Any

import httpx

from ..core.config import TransitConfig
from ..core.errors import APIError, NetworkError, RateLimitError
from ..core.retry import RetryConfig, async_retry
from .departures import normalize_stop_id, parse_departures
from .models import Departure, VehiclePosition
from .vehicles import parse_vehicles

logger = logging.getLogger(__name__)

API_RETRY = RetryConfig(max_attempts=3, base_delay=1.0, max_delay=10.0)


class TransitClient:
    """Async client for the FUTÁR OTP API.

    Usage:
        client = TransitClient(config.transit)
        departures = await client.get_departures("F01755")
    """

    DEPARTURES_ENDPOINT = "arrivals-and-departures-for-stop.json"
    VEHICLES_ENDPOINT = "vehicles-for-location.json"

    def __init__(
        self,
        config: TransitConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Transit section of the configuration
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self._config = config
        self._transport = transport

    def _base_params(self) -> dict[str, Any]:
        return {
            "key": self._config.api_key.get_secret_value(),
            "version": 3,
            "appVersion": self._config.app_version,
        }

    @async_retry(API_RETRY)
    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET an endpoint and decode its JSON body.

        Raises:
            NetworkError: On connection problems and timeouts
            RateLimitError: On HTTP 429
            APIError: On any other error status or an undecodable body
        """
        url = f"{self._config.base_url}/{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params={**self._base_params(), **params})
        except httpx.TransportError as e:
            raise NetworkError(f"Request to {endpoint} failed: {e}", cause=e) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "FUTÁR rate limit exceeded",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.status_code in (401, 403):
            raise APIError("Invalid API key", status_code=response.status_code)
        if response.is_error:
            raise APIError(
                f"HTTP error from {endpoint}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise APIError(f"Malformed JSON from {endpoint}", cause=e) from e
        if not isinstance(payload, dict):
            raise APIError(
                "Malformed payload",
                details={"endpoint": endpoint, "type": type(payload).__name__},
            )
        return payload

    async def get_departures(self, stop_id: str, now: float | None = None) -> list[Departure]:
        """Upcoming departures for a stop, soonest first."""
        full_stop_id = normalize_stop_id(stop_id)
        payload = await self._get(
            self.DEPARTURES_ENDPOINT,
            {
                "includeReferences": "routes,trips",
                "stopId": full_stop_id,
                "minutesBefore": 0,
                "minutesAfter": self._config.minutes_after,
            },
        )
        departures = parse_departures(payload, now=now, window_minutes=self._config.minutes_after)
        logger.debug("Fetched %d departures for %s", len(departures), full_stop_id)
        return departures

    async def get_vehicles(
        self,
        lat: float,
        lon: float,
        radius: int | None = None,
    ) -> list[VehiclePosition]:
        """Vehicles within ``radius`` metres of a point."""
        payload = await self._get(
            self.VEHICLES_ENDPOINT,
            {
                "lat": lat,
                "lon": lon,
                "radius": radius or self._config.vehicle_radius,
                "includeReferences": "routes",
            },
        )
        vehicles = parse_vehicles(payload)
        logger.debug("Fetched %d vehicles near %.5f,%.5f", len(vehicles), lat, lon)
        return vehicles
