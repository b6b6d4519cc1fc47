"""Stop lookup backed by a GTFS ``stops.txt`` file.

The file is parsed once, on first use, into a ``StopDirectory`` that is
created at startup and handed to whoever needs stop names or search.
"""

import csv
import logging
import math
import threading
import unicodedata
from pathlib import Path

from .departures import STOP_PREFIX
from .models import Stop

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000


def fold(text: str) -> str:
    """Lowercase and strip accents for search ("Széll" -> "szell")."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def clean_stop_id(stop_id: str) -> str:
    """Map an API stop id to its stops.txt key ("BKK_F01755" -> "F01755")."""
    bare = stop_id.replace(STOP_PREFIX, "", 1)
    return bare[1:] if bare.startswith("D") else bare


def _cell(row: list[str], col: int | None) -> str | None:
    return row[col] if col is not None and col < len(row) else None


def _as_float(value: str | None) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None


class StopDirectory:
    """Stop names, search and proximity over a GTFS stops table.

    Usage:
        stops = StopDirectory("data/stops.txt")
        stops.get_stop_name("BKK_F01755")
        stops.search("deák")
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._stops: dict[str, Stop] | None = None
        self._name_cache: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Stop]:
        """Parse the file. A missing or unreadable file gives an empty table."""
        stops: dict[str, Stop] = {}
        try:
            with open(self._path, encoding="utf-8-sig", newline="") as f:
                reader = csv.reader(f)
                header = next(reader, None)
                if header is None:
                    return stops
                columns = {name.strip(): i for i, name in enumerate(header)}
                id_col = columns.get("stop_id", 0)
                name_col = columns.get("stop_name", 1)
                lat_col = columns.get("stop_lat")
                lon_col = columns.get("stop_lon")

                for row in reader:
                    if len(row) <= max(id_col, name_col):
                        continue
                    stop_id = row[id_col].strip()
                    if not stop_id:
                        continue
                    stops[stop_id] = Stop(
                        stop_id=stop_id,
                        name=row[name_col].strip(),
                        latitude=_as_float(_cell(row, lat_col)),
                        longitude=_as_float(_cell(row, lon_col)),
                    )
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error("Error loading %s: %s", self._path, e)
            return {}

        logger.info("Loaded %d stops from %s", len(stops), self._path)
        return stops

    def _table(self) -> dict[str, Stop]:
        with self._lock:
            if self._stops is None:
                self._stops = self._load()
            return self._stops

    def __len__(self) -> int:
        return len(self._table())

    def load(self) -> int:
        """Parse the file now instead of on first lookup; returns the stop count."""
        return len(self._table())

    def reload(self) -> None:
        """Drop parsed data so the next lookup re-reads the file."""
        with self._lock:
            self._stops = None
            self._name_cache.clear()

    def get(self, stop_id: str) -> Stop | None:
        table = self._table()
        return table.get(stop_id) or table.get(clean_stop_id(stop_id))

    def get_stop_name(self, stop_id: str) -> str:
        """Display name for a stop, or "Megálló <id>" when unknown."""
        cached = self._name_cache.get(stop_id)
        if cached is not None:
            return cached

        stop = self.get(stop_id)
        name = stop.name if stop and stop.name else f"Megálló {stop_id.replace(STOP_PREFIX, '', 1)}"
        self._name_cache[stop_id] = name
        return name

    def search(self, query: str, limit: int = 10) -> list[Stop]:
        """Stops whose name contains ``query`` (accent-insensitive) or whose id starts with it.

        Names starting with the query come first, then alphabetical order.
        """
        needle = fold(query.strip())
        if not needle:
            return []

        matches = []
        for stop in self._table().values():
            folded = fold(stop.name)
            if needle in folded or stop.stop_id.casefold().startswith(needle):
                matches.append((not folded.startswith(needle), folded, stop.stop_id, stop))
        matches.sort(key=lambda m: m[:3])
        return [m[3] for m in matches[:limit]]

    def nearest(
        self,
        lat: float,
        lon: float,
        limit: int = 5,
        max_distance_m: float | None = None,
    ) -> list[tuple[Stop, float]]:
        """Closest stops with coordinates, as (stop, metres) pairs."""
        located = []
        for stop in self._table().values():
            if stop.latitude is None or stop.longitude is None:
                continue
            distance = haversine_m(lat, lon, stop.latitude, stop.longitude)
            if max_distance_m is None or distance <= max_distance_m:
                located.append((stop, distance))
        located.sort(key=lambda pair: pair[1])
        return located[:limit]
