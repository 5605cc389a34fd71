# looproute/services/optimizer_client.py

from time import perf_counter
from typing import List, Sequence

import httpx

from looproute.core.config import Settings, settings as default_settings
from looproute.core.errors import TourOptimizerError
from looproute.core.logger import logger
from looproute.models.geo import DisplayCoordinate


class TourOptimizerClient:
    """
    Client for the external tour-optimization service.

    The service is opaque: it receives the points as [lng, lat] pairs and
    answers with a permutation of their indices. Validation of that
    permutation is left to the tour applier.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.client = client

    async def optimize(self, points: Sequence[DisplayCoordinate]) -> List[int]:
        payload = {
            "xy": [list(p.as_pair()) for p in points],
            "temperature": self.settings.OPTIMIZER_TEMPERATURE,
            "sample": self.settings.OPTIMIZER_SAMPLE,
        }
        url = self.settings.OPTIMIZER_ENDPOINT

        t0 = perf_counter()
        try:
            if self.client is not None:
                response = await self.client.post(
                    url, json=payload, timeout=self.settings.OPTIMIZER_TIMEOUT_S
                )
            else:
                async with httpx.AsyncClient(timeout=self.settings.OPTIMIZER_TIMEOUT_S) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Optimizer request to {} failed: {}", url, e)
            raise TourOptimizerError(f"Optimizer request failed: {e}") from e
        except ValueError as e:
            raise TourOptimizerError("Optimizer returned invalid JSON") from e

        tour = data.get("tour") if isinstance(data, dict) else None
        if not isinstance(tour, list):
            raise TourOptimizerError("Optimizer response has no 'tour' array")

        logger.info(
            f"Optimizer returned a tour over {len(tour)} points "
            f"in {(perf_counter() - t0) * 1000.0:.2f} ms"
        )
        return tour
