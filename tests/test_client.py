"""Tests for the FUTÁR HTTP client."""

import asyncio

import httpx
import pytest

from bkkboard.core.config import TransitConfig
from bkkboard.core.errors import APIError, NetworkError, RateLimitError, ValidationError
from bkkboard.transit import MockTransitClient, TransitClient, create_client
from bkkboard.transit import client as client_module
from conftest import NOW, json_transport


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(client_module.API_RETRY, "base_delay", 0.0)
    monkeypatch.setattr(client_module.API_RETRY, "max_delay", 0.0)


@pytest.fixture
def transit_config():
    return TransitConfig(api_key="secret", base_url="https://futar.example/where/")


def make_client(config, handler):
    return TransitClient(config, transport=json_transport(handler))


def test_departures_request_parameters(transit_config, sample_payload):
    seen = []

    def handler(request):
        seen.append(request)
        return 200, sample_payload

    client = make_client(transit_config, handler)
    departures = asyncio.run(client.get_departures("F01755", now=NOW))

    assert [d.route for d in departures] == ["4", "7"]
    (request,) = seen
    assert request.url.path == "/where/arrivals-and-departures-for-stop.json"
    params = request.url.params
    assert params["key"] == "secret"
    assert params["version"] == "3"
    assert params["appVersion"] == "apiary-1.0"
    assert params["includeReferences"] == "routes,trips"
    assert params["stopId"] == "BKK_F01755"
    assert params["minutesBefore"] == "0"
    assert params["minutesAfter"] == "60"


def test_invalid_stop_id_is_rejected_before_request(transit_config):
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(transit_config, handler)
    with pytest.raises(ValidationError):
        asyncio.run(client.get_departures("bad id"))


def test_vehicles_request(transit_config):
    seen = []
    payload = {
        "status": "OK",
        "data": {
            "list": [
                {
                    "vehicleId": "BKK_4101",
                    "location": {"lat": 47.5, "lon": 19.05},
                    "routeId": "BKK_3040",
                    "bearing": 90,
                    "licensePlate": "V1234",
                    "vehicleRouteType": "TRAM",
                    "lastUpdateTime": NOW,
                },
                {"vehicleId": "BKK_NOWHERE"},
            ],
            "references": {"routes": {"BKK_3040": {"shortName": "4"}}},
        },
    }

    def handler(request):
        seen.append(request)
        return 200, payload

    client = make_client(transit_config, handler)
    (vehicle,) = asyncio.run(client.get_vehicles(47.5, 19.05))

    assert vehicle.vehicle_id == "BKK_4101"
    assert vehicle.route == "4"
    assert vehicle.bearing == 90.0
    assert vehicle.label == "V1234"
    assert vehicle.vehicle_type == "TRAM"
    assert seen[0].url.path.endswith("/vehicles-for-location.json")
    assert seen[0].url.params["radius"] == "1000"


def test_vehicles_custom_radius(transit_config):
    seen = []

    def handler(request):
        seen.append(request)
        return 200, {"status": "OK", "data": {"list": []}}

    client = make_client(transit_config, handler)
    assert asyncio.run(client.get_vehicles(47.5, 19.05, radius=250)) == []
    assert seen[0].url.params["radius"] == "250"


@pytest.mark.parametrize("status", [401, 403])
def test_auth_errors(transit_config, status):
    client = make_client(transit_config, lambda request: (status, {}))
    with pytest.raises(APIError) as excinfo:
        asyncio.run(client.get_departures("F01755"))
    assert excinfo.value.status_code == status
    assert "API key" in excinfo.value.message


def test_server_error_is_not_retried(transit_config):
    calls = []

    def handler(request):
        calls.append(request)
        return 500, {"status": "ERROR"}

    client = make_client(transit_config, handler)
    with pytest.raises(APIError) as excinfo:
        asyncio.run(client.get_departures("F01755"))
    assert excinfo.value.status_code == 500
    assert len(calls) == 1


def test_malformed_json(transit_config):
    client = make_client(
        transit_config,
        lambda request: httpx.Response(200, content=b"<html>not json</html>"),
    )
    with pytest.raises(APIError):
        asyncio.run(client.get_departures("F01755"))


@pytest.mark.parametrize("body", [[], "OK", 3, None])
def test_non_object_body_is_api_error(transit_config, body):
    calls = []

    def handler(request):
        calls.append(request)
        return 200, body

    client = make_client(transit_config, handler)
    with pytest.raises(APIError) as excinfo:
        asyncio.run(client.get_departures("F01755"))
    assert excinfo.value.message == "Malformed payload"
    assert len(calls) == 1
    with pytest.raises(APIError):
        asyncio.run(client.get_vehicles(47.5, 19.05))


def test_rate_limit_is_retried_then_raised(transit_config):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429, headers={"Retry-After": "0"})

    client = make_client(transit_config, handler)
    with pytest.raises(RateLimitError) as excinfo:
        asyncio.run(client.get_departures("F01755"))
    assert excinfo.value.retry_after == 0
    assert len(calls) == client_module.API_RETRY.max_attempts


def test_network_error_recovers_on_retry(transit_config, sample_payload):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return 200, sample_payload

    client = make_client(transit_config, handler)
    departures = asyncio.run(client.get_departures("F01755", now=NOW))
    assert len(departures) == 2
    assert len(calls) == 2


def test_network_error_after_all_attempts(transit_config):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(transit_config, handler)
    with pytest.raises(NetworkError):
        asyncio.run(client.get_departures("F01755"))


def test_create_client_selects_mock():
    assert isinstance(create_client(TransitConfig()), MockTransitClient)
    assert isinstance(create_client(TransitConfig(api_key="k", mock=True)), MockTransitClient)
    assert isinstance(create_client(TransitConfig(api_key="k")), TransitClient)


def test_mock_client_data():
    client = MockTransitClient(minutes_after=10)
    departures = asyncio.run(client.get_departures("F01755", now=NOW))
    assert departures
    assert all(d.minutes_until <= 10 for d in departures)
    assert departures[0].display_time == "MOST"
    assert departures[0].departure_time == NOW
    assert len(asyncio.run(client.get_vehicles(47.5, 19.05))) == 3
