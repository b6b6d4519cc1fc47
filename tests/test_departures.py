"""Tests for departure parsing."""

import pytest

from bkkboard.core.errors import APIError, ValidationError
from bkkboard.transit.departures import (
    format_display_time,
    is_night_route,
    minutes_until,
    normalize_stop_id,
    parse_departures,
    route_short_name,
    strip_stop_prefix,
)
from conftest import NOW, departures_payload, stop_time


def test_parse_sample(sample_payload):
    departures = parse_departures(sample_payload, now=NOW)

    assert [d.route for d in departures] == ["4", "7"]
    assert [d.minutes_until for d in departures] == [3, 10]
    tram, bus = departures
    assert tram.headsign == "Széll Kálmán tér"
    assert tram.vehicle_type == "TRAM"
    assert tram.display_time == "3 perc"
    assert tram.trip_id == "BKK_T2"
    assert tram.departure_time == NOW + 150
    assert bus.headsign == "Újpalota"
    assert not bus.is_night_bus


def test_parse_drops_departures_outside_window(sample_payload):
    trips = {d.trip_id for d in parse_departures(sample_payload, now=NOW)}
    assert "BKK_T3" not in trips
    assert "BKK_T4" not in trips


def test_parse_respects_window_argument(sample_payload):
    departures = parse_departures(sample_payload, now=NOW, window_minutes=5)
    assert [d.route for d in departures] == ["4"]


def test_scheduled_time_used_without_prediction():
    payload = departures_payload([stop_time("BKK_X", 4 * 60, predicted=False)])
    (departure,) = parse_departures(payload, now=NOW)
    assert departure.minutes_until == 4


def test_departing_now_shows_most():
    payload = departures_payload([stop_time("BKK_X", 0, predicted=False)])
    (departure,) = parse_departures(payload, now=NOW)
    assert departure.minutes_until == 0
    assert departure.display_time == "MOST"
    assert departure.is_arriving


def test_entries_without_time_are_skipped():
    payload = departures_payload([{"tripId": "BKK_X", "stopHeadsign": "Sehol"}])
    assert parse_departures(payload, now=NOW) == []


def test_missing_headsign_and_references():
    payload = departures_payload([{"tripId": "BKK_B3701234", "departureTime": NOW + 300}])
    (departure,) = parse_departures(payload, now=NOW)
    assert departure.headsign == "N/A"
    assert departure.route == "3701234"
    assert departure.vehicle_type == "UNDEFINED"


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "NOT_FOUND"},
        {},
        {"status": "OK", "data": {}},
        {"status": "OK", "data": {"entry": {"stopTimes": []}}},
    ],
)
def test_unusable_payloads_give_nothing(payload):
    assert parse_departures(payload, now=NOW) == []


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, 0), (29, 0), (30, 1), (90, 2), (150, 3), (-29, 0), (-30, 0), (-31, -1), (3600, 60)],
)
def test_minutes_until_rounds_half_up(seconds, expected):
    assert minutes_until(NOW + seconds, NOW) == expected


def test_route_short_name_fallbacks():
    assert route_short_name({"shortName": "M2"}, "BKK_5200", "BKK_T", 0) == "M2"
    assert route_short_name({}, "BKK_0070", None, 0) == "70"
    assert route_short_name(None, "BKK_9999", None, 0) == "9999"
    assert route_short_name(None, "BKK_000", None, 0) == "0"
    assert route_short_name(None, None, "BKK_A42B7", 0) == "42"
    assert route_short_name(None, None, "BKK_NONUM", 2) == "Járat 3"
    assert route_short_name(None, None, None, 0) == "Járat 1"


@pytest.mark.parametrize(
    "route, expected",
    [
        ({"color": "000000"}, True),
        ({"style": {"vehicleIcon": {"name": "night-bus"}}}, True),
        ({"style": {"groupId": 6}}, True),
        ({"color": "009FE3", "style": {"groupId": 1}}, False),
        (None, False),
    ],
)
def test_night_routes(route, expected):
    assert is_night_route(route) is expected


def test_night_flag_reaches_departure():
    payload = departures_payload(
        [stop_time("BKK_N", 600)],
        trips={"BKK_N": {"routeId": "BKK_9070"}},
        routes={"BKK_9070": {"shortName": "907", "type": "BUS", "color": "000000"}},
    )
    (departure,) = parse_departures(payload, now=NOW)
    assert departure.is_night_bus
    assert departure.route == "907"


def test_format_display_time():
    assert format_display_time(0) == "MOST"
    assert format_display_time(-2) == "MOST"
    assert format_display_time(7) == "7 perc"


def test_normalize_stop_id():
    assert normalize_stop_id("F01755") == "BKK_F01755"
    assert normalize_stop_id("BKK_F01755") == "BKK_F01755"
    assert normalize_stop_id("  F00940 ") == "BKK_F00940"
    assert strip_stop_prefix("BKK_F01755") == "F01755"


@pytest.mark.parametrize("stop_id", ["", "   ", "F01 755", "../etc", None])
def test_invalid_stop_ids(stop_id):
    with pytest.raises(ValidationError):
        normalize_stop_id(stop_id)


@pytest.mark.parametrize("payload", [[], "OK", None, 7])
def test_non_object_payload_raises(payload):
    with pytest.raises(APIError, match="Malformed payload"):
        parse_departures(payload, now=NOW)


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "OK", "data": []},
        {"status": "OK", "data": {"entry": "F01755"}},
        {"status": "OK", "data": {"entry": {"stopTimes": {"0": {}}}}},
    ],
)
def test_wrongly_shaped_sections_give_nothing(payload):
    assert parse_departures(payload, now=NOW) == []


def test_non_object_stop_times_are_skipped():
    payload = departures_payload([None, "BKK_T1", stop_time("BKK_T1", 120)])
    payload["data"]["references"] = {"trips": [], "routes": "none"}
    (departure,) = parse_departures(payload, now=NOW)
    assert departure.minutes_until == 3
    assert departure.route == "1"
