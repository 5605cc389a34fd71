# looproute/services/view.py

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from looproute.core.logger import logger
from looproute.models.geo import DisplayCoordinate, Node
from looproute.models.planning import PlaceCandidate


class RouteView(ABC):
    """
    What the planner needs from whatever draws the map.

    The planner only pushes state through these calls; it never reads back
    from the view.
    """

    @abstractmethod
    def render_nodes(self, nodes: Sequence[Node]) -> None:
        ...

    @abstractmethod
    def render_route(self, polyline: Sequence[DisplayCoordinate]) -> None:
        ...

    @abstractmethod
    def clear_route(self) -> None:
        ...

    @abstractmethod
    def render_results(self, candidates: Sequence[PlaceCandidate]) -> None:
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        ...


class InMemoryRouteView(RouteView):
    """
    Keeps the last published state; the HTTP layer serves it back.
    """

    def __init__(self) -> None:
        self.nodes: List[Node] = []
        self.route: List[DisplayCoordinate] = []
        self.results: List[PlaceCandidate] = []
        self.error: Optional[str] = None

    def render_nodes(self, nodes: Sequence[Node]) -> None:
        self.nodes = list(nodes)

    def render_route(self, polyline: Sequence[DisplayCoordinate]) -> None:
        self.route = list(polyline)
        self.error = None
        logger.debug("Route layer replaced ({} points)", len(self.route))

    def clear_route(self) -> None:
        self.route = []

    def render_results(self, candidates: Sequence[PlaceCandidate]) -> None:
        self.results = list(candidates)

    def show_error(self, message: str) -> None:
        self.error = message
