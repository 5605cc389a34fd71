# looproute/services/geocoding.py

from typing import Any, Dict, List

import httpx

from looproute.core.config import Settings, settings as default_settings
from looproute.core.errors import GeocodingError
from looproute.core.logger import logger
from looproute.models.geo import DisplayCoordinate, ProviderCoordinate
from looproute.models.planning import PlaceCandidate
from looproute.services.coord_transform import CoordinateTransformer

SUCCESS_STATUS = "1"


class GeocodingClient:
    """
    Place search and reverse geocoding against the provider's text services.

    The provider speaks provider coordinates; everything returned from here
    is in display coordinates.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.client = client

    async def search(self, query: str) -> List[PlaceCandidate]:
        query = query.strip()
        if not query:
            return []

        data = await self._get(
            self.settings.GEOCODE_ENDPOINT,
            {
                "key": self.settings.PROVIDER_API_KEY,
                "address": query,
                "city": self.settings.SEARCH_CITY,
                "output": "JSON",
            },
        )

        candidates: List[PlaceCandidate] = []
        for item in data.get("geocodes") or []:
            try:
                lng_str, lat_str = item["location"].split(",")
                provider = ProviderCoordinate(lng=float(lng_str), lat=float(lat_str))
            except (KeyError, AttributeError, ValueError):
                logger.warning("Skipping geocode result without a usable location: {}", item)
                continue
            candidates.append(
                PlaceCandidate(
                    place_name=item.get("formatted_address") or query,
                    center=CoordinateTransformer.to_display(provider),
                )
            )

        logger.info("Search {!r} returned {} candidate(s)", query, len(candidates))
        return candidates

    async def reverse_geocode(self, point: DisplayCoordinate) -> str:
        provider = CoordinateTransformer.to_provider(point)
        data = await self._get(
            self.settings.REVERSE_GEOCODE_ENDPOINT,
            {
                "key": self.settings.PROVIDER_API_KEY,
                "location": provider.as_param(),
                "output": "JSON",
            },
        )
        address = (data.get("regeocode") or {}).get("formatted_address")
        # The provider answers [] instead of a string when nothing matched
        if not isinstance(address, str) or not address:
            raise GeocodingError(f"No address found at {point.as_param()}")
        return address

    async def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if self.client is not None:
                response = await self.client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT_S) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Geocoding request to {} failed: {}", url, e)
            raise GeocodingError(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            raise GeocodingError("Geocoding service returned invalid JSON") from e

        if not isinstance(data, dict):
            raise GeocodingError("Geocoding service returned an unexpected body")
        if str(data.get("status")) != SUCCESS_STATUS:
            raise GeocodingError(f"Geocoding failed: {data.get('info') or 'unknown error'}")
        return data
