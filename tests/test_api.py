# tests/test_api.py
import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import OPTIMIZER_URL, REGEO_URL, GEOCODE_URL, make_settings, mock_client, straight_line_route
from looproute.api.v1 import shared
from looproute.main import app
from looproute.services.geocoding import GeocodingClient
from looproute.services.map_control import MapControl
from looproute.services.optimizer_client import TourOptimizerClient
from looproute.services.orchestrator import PlanningOrchestrator
from looproute.services.segment_router import SegmentRouter
from looproute.services.view import InMemoryRouteView

client = TestClient(app)


def fake_services(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url == OPTIMIZER_URL:
        return httpx.Response(200, json={"tour": [0, 2, 1]})
    if url.startswith(REGEO_URL):
        return httpx.Response(200, json={"status": "1", "regeocode": {"formatted_address": "Xihu District"}})
    if url.startswith(GEOCODE_URL):
        return httpx.Response(
            200,
            json={"status": "1", "geocodes": [{"formatted_address": "West Lake", "location": "120.148,30.242"}]},
        )
    return straight_line_route(request)


@pytest.fixture(autouse=True)
def planner(monkeypatch):
    settings = make_settings()
    http = mock_client(fake_services)
    geocoder = GeocodingClient(settings, client=http)
    orchestrator = PlanningOrchestrator(
        settings,
        router=SegmentRouter(settings, client=http),
        optimizer=TourOptimizerClient(settings, client=http),
        geocoder=geocoder,
        view=InMemoryRouteView(),
    )
    monkeypatch.setattr(shared, "orchestrator", orchestrator)
    monkeypatch.setattr(shared, "control", MapControl(orchestrator, geocoder=geocoder))
    return orchestrator


def add_three_nodes():
    for lat, lng in ((30.27, 120.15), (30.28, 120.16), (30.26, 120.14)):
        response = client.post("/nodes/", json={"lat": lat, "lng": lng})
        assert response.status_code == 200


def test_node_crud():
    add_three_nodes()

    data = client.get("/nodes/").json()
    assert len(data["nodes"]) == 3
    assert data["revision"] == 3

    data = client.post("/nodes/move", json={"src": 2, "dst": 0}).json()
    assert [n["lat"] for n in data["nodes"]] == [30.26, 30.27, 30.28]

    data = client.delete("/nodes/1").json()
    assert [n["lat"] for n in data["nodes"]] == [30.26, 30.28]

    data = client.delete("/nodes/last").json()
    assert [n["lat"] for n in data["nodes"]] == [30.26]

    assert client.delete("/nodes/5").status_code == 404
    assert client.post("/nodes/move", json={"src": 0, "dst": 4}).status_code == 404

    data = client.delete("/nodes/").json()
    assert data["nodes"] == []


def test_add_node_with_label():
    response = client.post("/nodes/", json={"lat": 30.27, "lng": 120.15, "label": True})
    assert response.status_code == 200
    assert response.json()["nodes"][0]["name"] == "Xihu District"


def test_add_node_rejects_bad_latitude():
    response = client.post("/nodes/", json={"lat": 95.0, "lng": 120.15})
    assert response.status_code == 422


def test_select_rejects_bad_latitude(planner):
    response = client.post(
        "/search/select",
        json={"place_name": "nowhere", "center": {"lng": 120.0, "lat": 95.0}},
    )
    assert response.status_code == 422
    assert planner.nodes == ()


def test_plan_with_too_few_nodes():
    client.post("/nodes/", json={"lat": 30.27, "lng": 120.15})

    response = client.post("/plan/", json={"optimize": False})
    assert response.status_code == 422

    route = client.get("/plan/route").json()
    assert route["geometry"]["coordinates"] == []
    assert route["error"]


def test_plan_optimized_route():
    add_three_nodes()

    response = client.post("/plan/", json={"optimize": True})
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "success"
    assert data["tour"] == [0, 2, 1]
    assert [n["lat"] for n in data["nodes"]] == [30.27, 30.26, 30.28]

    coords = data["geometry"]["coordinates"]
    assert data["geometry"]["type"] == "LineString"
    assert len(coords) >= 4
    # [lng, lat] order, closed loop
    assert abs(coords[0][0] - 120.15) < 1e-3
    assert abs(coords[0][1] - 30.27) < 1e-3
    assert abs(coords[-1][0] - coords[0][0]) < 1e-9
    assert abs(coords[-1][1] - coords[0][1]) < 1e-9

    route = client.get("/plan/route").json()
    assert route["geometry"]["coordinates"] == coords
    assert route["error"] is None

    cleared = client.delete("/plan/route").json()
    assert cleared["geometry"]["coordinates"] == []
    assert client.get("/plan/route").json()["geometry"]["coordinates"] == []


def test_plan_provider_failure(planner, monkeypatch):
    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "0", "info": "SERVICE_NOT_AVAILABLE"})

    monkeypatch.setattr(planner.router, "client", mock_client(failing))
    add_three_nodes()

    response = client.post("/plan/", json={})
    assert response.status_code == 502
    assert "SERVICE_NOT_AVAILABLE" in response.json()["detail"]


def test_search_and_select():
    results = client.get("/search/", params={"q": "West Lake"}).json()
    assert len(results) == 1
    assert results[0]["place_name"] == "West Lake"

    data = client.post("/search/select", json=results[0]).json()
    assert data["nodes"][0]["name"] == "West Lake"
    assert abs(data["nodes"][0]["lng"] - 120.148) < 0.01


def test_empty_search():
    assert client.get("/search/").json() == []
