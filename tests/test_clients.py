# tests/test_clients.py
import asyncio
import json

import httpx
import pytest

from conftest import mock_client
from looproute.core.errors import GeocodingError, TourOptimizerError
from looproute.models.geo import DisplayCoordinate
from looproute.services.coord_transform import CoordinateTransformer
from looproute.services.geocoding import GeocodingClient
from looproute.services.optimizer_client import TourOptimizerClient

POINTS = [
    DisplayCoordinate(lng=120.15, lat=30.27),
    DisplayCoordinate(lng=120.16, lat=30.28),
    DisplayCoordinate(lng=120.14, lat=30.26),
]


def test_optimizer_payload_and_tour(settings):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"tour": [0, 2, 1]})

    client = TourOptimizerClient(settings, client=mock_client(handler))
    tour = asyncio.run(client.optimize(POINTS))

    assert tour == [0, 2, 1]
    assert bodies[0]["xy"] == [[120.15, 30.27], [120.16, 30.28], [120.14, 30.26]]
    assert bodies[0]["temperature"] == settings.OPTIMIZER_TEMPERATURE
    assert bodies[0]["sample"] is False


def test_optimizer_without_tour(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"detail": "model not loaded"})

    client = TourOptimizerClient(settings, client=mock_client(handler))
    with pytest.raises(TourOptimizerError):
        asyncio.run(client.optimize(POINTS))


def test_optimizer_transport_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = TourOptimizerClient(settings, client=mock_client(handler))
    with pytest.raises(TourOptimizerError):
        asyncio.run(client.optimize(POINTS))


def test_search_converts_to_display(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["address"] == "West Lake"
        assert request.url.params["city"] == settings.SEARCH_CITY
        return httpx.Response(
            200,
            json={
                "status": "1",
                "geocodes": [
                    {"formatted_address": "West Lake, Hangzhou", "location": "120.148,30.242"},
                    {"formatted_address": "broken", "location": []},
                ],
            },
        )

    geocoder = GeocodingClient(settings, client=mock_client(handler))
    results = asyncio.run(geocoder.search("  West Lake "))

    assert len(results) == 1
    assert results[0].place_name == "West Lake, Hangzhou"
    # Provider location converted back to display coordinates
    assert results[0].center != DisplayCoordinate(lng=120.148, lat=30.242)
    assert abs(results[0].center.lng - 120.148) < 0.01


def test_empty_search_makes_no_request(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    geocoder = GeocodingClient(settings, client=mock_client(handler))
    assert asyncio.run(geocoder.search("   ")) == []


def test_search_error_status(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "0", "info": "INVALID_USER_KEY"})

    geocoder = GeocodingClient(settings, client=mock_client(handler))
    with pytest.raises(GeocodingError):
        asyncio.run(geocoder.search("West Lake"))


def test_reverse_geocode_sends_provider_location(settings):
    point = DisplayCoordinate(lng=120.15, lat=30.27)
    expected = CoordinateTransformer.to_provider(point).as_param()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["location"] == expected
        return httpx.Response(
            200,
            json={"status": "1", "regeocode": {"formatted_address": "Xihu District, Hangzhou"}},
        )

    geocoder = GeocodingClient(settings, client=mock_client(handler))
    assert asyncio.run(geocoder.reverse_geocode(point)) == "Xihu District, Hangzhou"


def test_reverse_geocode_without_address(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "1", "regeocode": {"formatted_address": []}})

    geocoder = GeocodingClient(settings, client=mock_client(handler))
    with pytest.raises(GeocodingError):
        asyncio.run(geocoder.reverse_geocode(DisplayCoordinate(lng=120.15, lat=30.27)))
