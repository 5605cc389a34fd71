# looproute/services/map_control.py

from typing import List

from looproute.core.logger import logger
from looproute.models.planning import PlaceCandidate
from looproute.services.geocoding import GeocodingClient
from looproute.services.orchestrator import PlanningOrchestrator, PlanResult


class MapControl:
    """
    The search / optimize / clear control attached to the map.

    Binds user actions to the geocoder and the planner and pushes results
    to the planner's view. Holds no state of its own.
    """

    def __init__(self, orchestrator: PlanningOrchestrator, geocoder: GeocodingClient | None = None) -> None:
        self.orchestrator = orchestrator
        self.geocoder = geocoder or orchestrator.geocoder

    @property
    def view(self):
        return self.orchestrator.view

    async def on_search(self, query: str) -> List[PlaceCandidate]:
        candidates = await self.geocoder.search(query)
        self.view.render_results(candidates)
        return candidates

    def on_select(self, candidate: PlaceCandidate) -> int:
        index = self.orchestrator.add_node(
            lat=candidate.center.lat,
            lng=candidate.center.lng,
            name=candidate.place_name,
        )
        self.view.render_results([])
        logger.info("Added node {} from search result {!r}", index, candidate.place_name)
        return index

    async def on_optimize(self) -> PlanResult:
        return await self.orchestrator.plan(optimize=True)

    def on_clear(self) -> None:
        self.orchestrator.clear()
