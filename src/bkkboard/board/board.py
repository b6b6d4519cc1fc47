"""Departure board for a single stop.

Keeps the latest departures for one stop and turns them into board lines,
dot-matrix text and images.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Protocol

from PIL import Image

from ..core.config import BoardConfig
from ..core.errors import BoardError
from ..core.threading import LockedValue
from ..display.dotmatrix import Matrix, create_dot_matrix_text
from ..display.graphics import Palette
from ..display.renderer import MatrixRenderer
from ..transit.departures import normalize_stop_id
from ..transit.models import Departure
from ..transit.stops import StopDirectory
from .layout import BoardLine, layout_departures

logger = logging.getLogger(__name__)


class DepartureSource(Protocol):
    async def get_departures(self, stop_id: str, now: float | None = None) -> list[Departure]:
        ...


class DepartureBoard:
    """State and rendering for one stop's board.

    Thread Safety:
        update_data() runs on the poller thread while lines()/render()
        are called from the web layer; departures live in a LockedValue.

    Usage:
        board = DepartureBoard("F01755", client, stops, config.board)
        board.update_data()
        image = board.render()
    """

    def __init__(
        self,
        stop_id: str,
        client: DepartureSource,
        stops: StopDirectory,
        settings: BoardConfig | None = None,
    ) -> None:
        self._settings = settings or BoardConfig()
        self._stop_id = normalize_stop_id(stop_id)
        self._client = client
        self._stops = stops
        self._departures: LockedValue[list[Departure]] = LockedValue([])
        self._last_update: datetime | None = None
        self._last_error: str | None = None
        self._renderer = MatrixRenderer(
            pitch=self._settings.pixel_pitch,
            palette=Palette.from_hex(self._settings.lit_color, self._settings.unlit_color),
        )

    @property
    def stop_id(self) -> str:
        return self._stop_id

    @property
    def stop_name(self) -> str:
        return self._stops.get_stop_name(self._stop_id)

    @property
    def departures(self) -> list[Departure]:
        return list(self._departures.get())

    @property
    def last_update(self) -> datetime | None:
        return self._last_update

    @property
    def last_error(self) -> str | None:
        return self._last_error

    async def refresh(self) -> list[Departure]:
        """Fetch departures now.

        A failed fetch clears the board and is retried on the next refresh.
        """
        try:
            departures = await self._client.get_departures(self._stop_id)
        except BoardError as e:
            logger.error("Departure update for %s failed: %s", self._stop_id, e)
            return self._fail(str(e))
        except Exception as e:
            logger.exception("Unexpected error updating %s", self._stop_id)
            return self._fail(f"{type(e).__name__}: {e}")

        self._departures.set(departures)
        self._last_update = datetime.now()
        self._last_error = None
        logger.debug("Board %s has %d departures", self._stop_id, len(departures))
        return departures

    def _fail(self, message: str) -> list[Departure]:
        self._last_error = message
        self._departures.set([])
        return []

    def update_data(self) -> None:
        """Blocking refresh for the poller thread."""
        asyncio.run(self.refresh())

    def lines(self, viewport_width: int | None = None) -> list[BoardLine]:
        return layout_departures(
            self._departures.get(),
            viewport_width or self._settings.viewport_width,
            self._settings.max_lines,
        )

    def matrices(self, viewport_width: int | None = None) -> list[Matrix]:
        return [create_dot_matrix_text(line.text) for line in self.lines(viewport_width)]

    def render(self, viewport_width: int | None = None) -> Image.Image:
        return self._renderer.render_lines(self.matrices(viewport_width))

    def snapshot(self, viewport_width: int | None = None) -> dict[str, Any]:
        """Everything the web board needs in one JSON-friendly dict."""
        lines = self.lines(viewport_width)
        return {
            "stop_id": self._stop_id,
            "stop_name": self.stop_name,
            "updated_at": self._last_update.isoformat() if self._last_update else None,
            "error": self._last_error,
            "lines": [
                {
                    "text": line.text,
                    "arriving": line.arriving,
                    "matrix": create_dot_matrix_text(line.text),
                }
                for line in lines
            ],
        }
