"""Shared fixtures for the departure board tests."""

import json
import logging

import httpx
import pytest

from bkkboard.core.config import ConfigManager
from bkkboard.core.logging import ConsoleFormatter, JSONFormatter
from bkkboard.transit.stops import StopDirectory

NOW = 1_700_000_000

STOPS_CSV = """stop_id,stop_name,stop_lat,stop_lon,location_type
F01755,"Deák Ferenc tér",47.497418,19.054326,0
F00940,"Széll Kálmán tér M",47.507150,19.024773,0
F02285,"Keleti pályaudvar M",47.500255,19.083521,0
"008151","Újpest-központ, Árpád út",47.560420,19.090100,0
F09999,"Nowhere, ""quoted"" stop",,,0
"""


@pytest.fixture(autouse=True)
def reset_config_singleton(monkeypatch):
    monkeypatch.delenv("BKK_API_KEY", raising=False)
    ConfigManager.reset_instance()
    yield
    ConfigManager.reset_instance()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (ConsoleFormatter, JSONFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def stops_file(tmp_path):
    path = tmp_path / "stops.txt"
    path.write_text(STOPS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def stops(stops_file):
    return StopDirectory(stops_file)


def stop_time(trip_id, offset_seconds, headsign="Örs vezér tere", predicted=True):
    entry = {"tripId": trip_id, "stopHeadsign": headsign, "departureTime": NOW + offset_seconds}
    if predicted:
        entry["predictedDepartureTime"] = NOW + offset_seconds + 30
    return entry


def departures_payload(stop_times, trips=None, routes=None, status="OK"):
    return {
        "status": status,
        "data": {
            "entry": {"stopId": "BKK_F01755", "stopTimes": stop_times},
            "references": {"trips": trips or {}, "routes": routes or {}},
        },
    }


@pytest.fixture
def sample_payload():
    return departures_payload(
        [
            stop_time("BKK_T1", 9 * 60, headsign="Újpalota"),
            stop_time("BKK_T2", 2 * 60, headsign="Széll Kálmán tér"),
            stop_time("BKK_T3", 90 * 60),
            stop_time("BKK_T4", -5 * 60),
        ],
        trips={
            "BKK_T1": {"routeId": "BKK_0070"},
            "BKK_T2": {"routeId": "BKK_3040"},
            "BKK_T3": {"routeId": "BKK_0070"},
            "BKK_T4": {"routeId": "BKK_0070"},
        },
        routes={
            "BKK_0070": {"id": "BKK_0070", "shortName": "7", "type": "BUS", "color": "1E1E1E"},
            "BKK_3040": {"id": "BKK_3040", "shortName": "4", "type": "TRAM", "color": "FFD800"},
        },
    )


def json_transport(handler):
    """MockTransport whose handler returns (status, body) or an httpx.Response."""

    def _handle(request: httpx.Request) -> httpx.Response:
        result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        status, body = result
        return httpx.Response(status, content=json.dumps(body).encode("utf-8"))

    return httpx.MockTransport(_handle)


class FakeClient:
    """Departure source returning canned results or raising."""

    def __init__(self, departures=None, error=None):
        self.departures = departures or []
        self.error = error
        self.calls = []

    async def get_departures(self, stop_id, now=None):
        self.calls.append(stop_id)
        if self.error:
            raise self.error
        return list(self.departures)

    async def get_vehicles(self, lat, lon, radius=None):
        if self.error:
            raise self.error
        return []
