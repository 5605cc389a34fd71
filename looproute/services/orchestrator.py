# looproute/services/orchestrator.py

from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import List, Optional, Set, Tuple

from looproute.core.config import Settings, settings as default_settings
from looproute.core.errors import (
    GeocodingError,
    InsufficientNodesError,
    PlanningError,
    RoutingProviderError,
    StaleResultDiscarded,
)
from looproute.core.logger import logger
from looproute.models.geo import DisplayCoordinate, Node
from looproute.services.coord_transform import CoordinateTransformer
from looproute.services.geocoding import GeocodingClient
from looproute.services.optimizer_client import TourOptimizerClient
from looproute.services.segment_router import SegmentRouter
from looproute.services.segmenter import LoopSegmenter
from looproute.services.stitcher import stitch
from looproute.services.tour_applier import apply_tour, close_loop
from looproute.services.view import InMemoryRouteView, RouteView


class PlanState(str, Enum):
    IDLE = "idle"
    PLANNING = "planning"


class PlanStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class PlanningAttempt:
    """
    One planning request: the node snapshot it runs on and its sequence number.
    """
    seq: int
    revision: int
    nodes: Tuple[Node, ...]
    optimize: bool


@dataclass
class PlanResult:
    status: PlanStatus
    seq: int
    nodes: Tuple[Node, ...] = ()
    route: List[DisplayCoordinate] = field(default_factory=list)
    tour: Optional[List[int]] = None
    error: Optional[PlanningError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class PlanningOrchestrator:
    """
    Owns the node list and sequences a planning attempt:

        snapshot -> (optimizer tour) -> closed loop -> provider coords
        -> segments -> routed polylines -> stitched display route

    Attempts may overlap. Each one carries a monotonically increasing
    sequence number and the node-list revision it was taken at; a finished
    attempt is published only if it is still the latest attempt and the
    node list has not changed since. Anything else is dropped without
    touching the view.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        router: SegmentRouter | None = None,
        optimizer: TourOptimizerClient | None = None,
        geocoder: GeocodingClient | None = None,
        view: RouteView | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.router = router or SegmentRouter(self.settings)
        self.optimizer = optimizer or TourOptimizerClient(self.settings)
        self.geocoder = geocoder or GeocodingClient(self.settings)
        self.view = view or InMemoryRouteView()
        self.segmenter = LoopSegmenter(self.settings.PROVIDER_POINT_LIMIT)

        self._nodes: List[Node] = []
        # Bumped on every geometric change to the node list
        self._revision = 0
        self._latest_seq = 0
        self._in_flight: Set[int] = set()
        # Published route and the revision it was planned for
        self._route: List[DisplayCoordinate] = []
        self._route_revision: Optional[int] = None
        self.last_result: Optional[PlanResult] = None

        logger.info(
            "PlanningOrchestrator initialised (provider point limit = {}).",
            self.settings.PROVIDER_POINT_LIMIT,
        )

    # ------------------------------------------------------------------ #
    # Node list
    # ------------------------------------------------------------------ #

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def state(self) -> PlanState:
        return PlanState.PLANNING if self._in_flight else PlanState.IDLE

    @property
    def route(self) -> List[DisplayCoordinate]:
        """The route currently published to the view ([] if none)."""
        return list(self._route)

    @property
    def last_error(self) -> Optional[str]:
        if self.last_result is not None and self.last_result.status == PlanStatus.FAILED:
            return self.last_result.message
        return None

    def add_node(self, lat: float, lng: float, name: Optional[str] = None) -> int:
        self._nodes.append(Node(lat=lat, lng=lng, name=name))
        self._mutated()
        return len(self._nodes) - 1

    def remove_node(self, index: int) -> Node:
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"No node at index {index}")
        node = self._nodes.pop(index)
        self._mutated()
        return node

    def remove_last(self) -> Optional[Node]:
        if not self._nodes:
            return None
        return self.remove_node(len(self._nodes) - 1)

    def move_node(self, src: int, dst: int) -> None:
        n = len(self._nodes)
        if not (0 <= src < n and 0 <= dst < n):
            raise IndexError(f"Cannot move node {src} -> {dst} in a list of {n}")
        if src == dst:
            return
        node = self._nodes.pop(src)
        self._nodes.insert(dst, node)
        self._mutated()

    def clear(self) -> None:
        self._nodes = []
        self._mutated()
        self.view.render_results([])

    def clear_route(self) -> None:
        self._route = []
        self._route_revision = None
        self.view.clear_route()

    async def label_node(self, index: int) -> Optional[str]:
        """
        Name the node at `index` from reverse geocoding.

        The name is dropped if the node list changed while the lookup was
        in flight, since positions may no longer refer to the same node.
        """
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"No node at index {index}")

        revision = self._revision
        node = self._nodes[index]
        try:
            name = await self.geocoder.reverse_geocode(node.coordinate())
        except GeocodingError as e:
            logger.warning("Could not name node {}: {}", index, e.message)
            return None

        if self._revision != revision:
            logger.debug("Node list changed during reverse geocoding; dropping name {!r}", name)
            return None

        # A name is not a geometric change: in-flight plans stay valid
        self._nodes[index] = node.model_copy(update={"name": name})
        self.view.render_nodes(self.nodes)
        return name

    # ------------------------------------------------------------------ #
    # Planning
    # ------------------------------------------------------------------ #

    async def plan(self, optimize: bool = False) -> PlanResult:
        snapshot = self.nodes

        if len(snapshot) < 2:
            error = InsufficientNodesError(
                f"At least 2 nodes are required to plan a route, got {len(snapshot)}"
            )
            logger.warning(error.message)
            self.view.show_error(error.message)
            result = PlanResult(status=PlanStatus.FAILED, seq=self._latest_seq, nodes=snapshot, error=error)
            self.last_result = result
            return result

        self._latest_seq += 1
        attempt = PlanningAttempt(
            seq=self._latest_seq,
            revision=self._revision,
            nodes=snapshot,
            optimize=optimize,
        )
        self._in_flight.add(attempt.seq)
        logger.info(
            "Planning attempt #{} started: {} nodes, optimize={}",
            attempt.seq,
            len(snapshot),
            optimize,
        )

        try:
            try:
                tour, route = await self._run(attempt)
            except PlanningError as e:
                self._ensure_current(attempt)
                return self._fail(attempt, e)

            self._ensure_current(attempt)
            return self._publish(attempt, tour, route)
        except StaleResultDiscarded as e:
            logger.debug("Planning attempt #{} discarded: {}", attempt.seq, e)
            return PlanResult(status=PlanStatus.DISCARDED, seq=attempt.seq, nodes=snapshot)
        finally:
            self._in_flight.discard(attempt.seq)

    async def _run(self, attempt: PlanningAttempt) -> Tuple[Optional[List[int]], List[DisplayCoordinate]]:
        """
        Compute the route for one attempt. Touches nothing but the snapshot.
        """
        t0 = perf_counter()

        tour: Optional[List[int]] = None
        if attempt.optimize:
            tour = await self.optimizer.optimize([n.coordinate() for n in attempt.nodes])
            loop = apply_tour(attempt.nodes, tour)
        else:
            loop = close_loop(attempt.nodes)

        provider_loop = [CoordinateTransformer.to_provider(n.coordinate()) for n in loop]
        segments = self.segmenter.segment(provider_loop)

        # Routed one at a time, in loop order
        polylines = []
        for i, segment in enumerate(segments):
            logger.debug("Attempt #{}: routing segment {}/{}", attempt.seq, i + 1, len(segments))
            polylines.append(await self.router.route(segment))

        route = stitch(polylines)
        if not route:
            raise RoutingProviderError("No route could be produced for these nodes")

        logger.info(
            f"Attempt #{attempt.seq}: {len(segments)} segment(s), {len(route)} route points "
            f"in {(perf_counter() - t0) * 1000.0:.2f} ms"
        )
        return tour, route

    def _ensure_current(self, attempt: PlanningAttempt) -> None:
        if attempt.seq != self._latest_seq or attempt.revision != self._revision:
            raise StaleResultDiscarded(attempt.seq, self._latest_seq)

    def _publish(
        self,
        attempt: PlanningAttempt,
        tour: Optional[List[int]],
        route: List[DisplayCoordinate],
    ) -> PlanResult:
        if tour is not None:
            # Same revision as the snapshot, so positions still line up;
            # reorder the live list to keep names resolved in the meantime.
            self._nodes = [self._nodes[i] for i in tour]
            self._revision += 1
            self.view.render_nodes(self.nodes)

        self.view.render_route(route)
        self._route = list(route)
        self._route_revision = self._revision

        result = PlanResult(
            status=PlanStatus.SUCCESS,
            seq=attempt.seq,
            nodes=self.nodes,
            route=route,
            tour=tour,
        )
        self.last_result = result
        logger.info("Planning attempt #{} published", attempt.seq)
        return result

    def _fail(self, attempt: PlanningAttempt, error: PlanningError) -> PlanResult:
        logger.error("Planning attempt #{} failed: {}", attempt.seq, error.message)
        if self.settings.CLEAR_ROUTE_ON_FAILURE:
            self.clear_route()
        self.view.show_error(error.message)

        result = PlanResult(status=PlanStatus.FAILED, seq=attempt.seq, nodes=attempt.nodes, error=error)
        self.last_result = result
        return result

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _mutated(self) -> None:
        """
        Record a geometric change: in-flight attempts become stale and a
        rendered route no longer matches the nodes.
        """
        self._revision += 1
        self.view.render_nodes(self.nodes)
        if self._route_revision is not None:
            self.clear_route()
