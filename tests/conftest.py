# tests/conftest.py
import os
import sys

import httpx
import pytest

# Add the project root directory to sys.path so that "import looproute" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from looproute.core.config import Settings  # noqa: E402

ROUTING_URL = "https://routing.test/v3/direction/driving"
OPTIMIZER_URL = "https://optimizer.test/optimize_path"
GEOCODE_URL = "https://geo.test/v3/geocode/geo"
REGEO_URL = "https://geo.test/v3/geocode/regeo"


def make_settings(**overrides) -> Settings:
    values = dict(
        PROVIDER_API_KEY="test-key",
        PROVIDER_POINT_LIMIT=16,
        ROUTING_ENDPOINT=ROUTING_URL,
        OPTIMIZER_ENDPOINT=OPTIMIZER_URL,
        GEOCODE_ENDPOINT=GEOCODE_URL,
        REVERSE_GEOCODE_ENDPOINT=REGEO_URL,
    )
    values.update(overrides)
    return Settings(**values)


def straight_line_route(request: httpx.Request) -> httpx.Response:
    """
    Fake driving provider: drives straight through origin, waypoints and
    destination, one step per leg.
    """
    params = request.url.params
    points = [params["origin"]]
    if params.get("waypoints"):
        points.extend(params["waypoints"].split(";"))
    points.append(params["destination"])

    steps = [{"polyline": f"{a};{b}"} for a, b in zip(points[:-1], points[1:])]
    return httpx.Response(
        200,
        json={"status": "1", "info": "OK", "route": {"paths": [{"steps": steps}]}},
    )


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def settings() -> Settings:
    return make_settings()
