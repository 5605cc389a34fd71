# looproute/services/segment_router.py

from time import perf_counter
from typing import Any, Dict, List, Sequence

import httpx

from looproute.core.config import Settings, settings as default_settings
from looproute.core.errors import EmptySegmentError, RoutingProviderError
from looproute.core.logger import logger
from looproute.models.geo import DisplayCoordinate, ProviderCoordinate
from looproute.services.coord_transform import CoordinateTransformer

SUCCESS_STATUS = "1"


def decode_polyline(encoded: str) -> List[ProviderCoordinate]:
    """
    Decode a provider polyline: ";"-separated "lng,lat" vertices.
    """
    vertices: List[ProviderCoordinate] = []
    for chunk in encoded.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        lng_str, lat_str = chunk.split(",")
        vertices.append(ProviderCoordinate(lng=float(lng_str), lat=float(lat_str)))
    return vertices


class SegmentRouter:
    """
    Routes one segment per call against the external driving-route provider.

    The first point of a segment is the origin, the last the destination,
    and interior points are passed as ordered waypoints. The returned
    polyline is already converted back to display coordinates.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        # Injected client (tests, connection reuse); otherwise one per call
        self.client = client

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def route(self, segment: Sequence[ProviderCoordinate]) -> List[DisplayCoordinate]:
        if len(segment) < 2:
            raise EmptySegmentError(f"Segment has {len(segment)} point(s), need at least 2")

        params = self._build_params(segment)
        t0 = perf_counter()
        data = await self._get(params)
        logger.info(
            "Routed segment of {} points in {:.2f} ms",
            len(segment),
            (perf_counter() - t0) * 1000.0,
        )

        status = str(data.get("status"))
        if status != SUCCESS_STATUS:
            message = data.get("info") or f"status {status}"
            logger.warning("Routing provider rejected segment: {}", message)
            raise RoutingProviderError(f"Routing failed: {message}")

        return self._extract_polyline(data)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _build_params(self, segment: Sequence[ProviderCoordinate]) -> Dict[str, Any]:
        for point in segment:
            if not isinstance(point, ProviderCoordinate):
                raise TypeError(f"Segments must hold ProviderCoordinate, got {type(point).__name__}")

        return {
            "key": self.settings.PROVIDER_API_KEY,
            "origin": segment[0].as_param(),
            "destination": segment[-1].as_param(),
            "waypoints": ";".join(p.as_param() for p in segment[1:-1]),
            "strategy": self.settings.ROUTING_STRATEGY,
            "extensions": "base",
            "output": "JSON",
        }

    async def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        url = self.settings.ROUTING_ENDPOINT
        try:
            if self.client is not None:
                response = await self.client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT_S) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Routing request to {} failed: {}", url, e)
            raise RoutingProviderError(f"Routing request failed: {e}") from e
        except ValueError as e:
            raise RoutingProviderError("Routing provider returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RoutingProviderError("Routing provider returned an unexpected body")
        return data

    def _extract_polyline(self, data: Dict[str, Any]) -> List[DisplayCoordinate]:
        """
        Concatenate the step polylines of the first path, in step order.
        """
        try:
            paths = data["route"]["paths"]
        except (KeyError, TypeError) as e:
            raise RoutingProviderError("Routing response has no route paths") from e
        if not isinstance(paths, list):
            raise RoutingProviderError("Routing response paths are not a list")
        if not paths:
            return []

        coords: List[DisplayCoordinate] = []
        try:
            for step in paths[0].get("steps", []):
                for vertex in decode_polyline(step.get("polyline", "")):
                    coords.append(CoordinateTransformer.to_display(vertex))
        except (ValueError, AttributeError) as e:
            raise RoutingProviderError(f"Malformed polyline in routing response: {e}") from e

        return coords
