import asyncio

import httpx

from routegrid.models.domain import Coordinates
from routegrid.services.geocoding.nominatim_client import NominatimGeocoder, parse_coordinate_literal


def _geocoder(handler) -> NominatimGeocoder:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NominatimGeocoder(base_url="https://geo.example", user_agent="routegrid-tests", client=client)


def test_literal_coordinates_skip_the_search_service():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    result = asyncio.run(_geocoder(handler).forward_geocode("40.7128, -74.0060"))

    assert result == Coordinates(lat=40.7128, lng=-74.006, name="40.7128, -74.0060")
    assert calls == []


def test_parse_coordinate_literal_accepts_signs_and_whitespace():
    assert parse_coordinate_literal("  +10 ,-20.5 ") == Coordinates(10.0, -20.5, "  +10 ,-20.5 ")
    assert parse_coordinate_literal("10,20") == Coordinates(10.0, 20.0, "10,20")
    assert parse_coordinate_literal("Berlin, Germany") is None
    assert parse_coordinate_literal("10, 20, 30") is None


def test_forward_geocode_returns_first_search_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["agent"] = request.headers.get("user-agent")
        return httpx.Response(
            200,
            json=[
                {"lat": "48.8566", "lon": "2.3522", "display_name": "Paris, France"},
                {"lat": "33.66", "lon": "-95.55", "display_name": "Paris, Texas"},
            ],
        )

    result = asyncio.run(_geocoder(handler).forward_geocode("Paris"))

    assert result == Coordinates(lat=48.8566, lng=2.3522, name="Paris, France")
    assert seen["path"] == "/search"
    assert seen["params"] == {"format": "json", "q": "Paris"}
    assert seen["agent"] == "routegrid-tests"


def test_forward_geocode_misses_are_signalled_by_none():
    responses = [
        httpx.Response(200, json=[]),
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, content=b"<html>not json</html>"),
        httpx.Response(200, json=[{"display_name": "no coordinates"}]),
    ]

    for response in responses:
        geocoder = _geocoder(lambda request, response=response: response)
        assert asyncio.run(geocoder.forward_geocode("Nowhere")) is None


def test_forward_geocode_transport_failure_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert asyncio.run(_geocoder(handler).forward_geocode("Paris")) is None


def test_reverse_geocode_returns_label_and_normalizes_longitude():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"display_name": "Somewhere in the Pacific"})

    label = asyncio.run(_geocoder(handler).reverse_geocode(10.0, 190.0))

    assert label == "Somewhere in the Pacific"
    assert seen["params"]["lon"] == "-170.0"
    assert seen["params"]["lat"] == "10.0"


def test_reverse_geocode_degrades_to_coordinate_label():
    def no_data(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "Unable to geocode"})

    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert asyncio.run(_geocoder(no_data).reverse_geocode(48.5, 190)) == "48.500000, -170.000000"
    assert asyncio.run(_geocoder(failing).reverse_geocode(1.25, 2.5)) == "1.250000, 2.500000"


def test_forward_geocode_rejects_non_finite_search_result():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"lat": "inf", "lon": "2.35", "display_name": "Nowhere"}])

    assert asyncio.run(_geocoder(handler).forward_geocode("Nowhere")) is None
