# looproute/core/errors.py
"""
Error taxonomy for the route planning pipeline.

Everything a planning attempt can fail with derives from PlanningError, so
the orchestrator can catch the whole family at its boundary.
"""


class PlanningError(Exception):
    """Base class for user-facing planning failures."""

    message: str = "Route planning failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class InsufficientNodesError(PlanningError):
    message = "At least 2 nodes are required to plan a route"


class InvalidTourError(PlanningError):
    message = "Tour is not a permutation of the node indices"


class RoutingProviderError(PlanningError):
    message = "Routing provider returned an error"


class EmptySegmentError(PlanningError):
    message = "A segment needs at least 2 points"


class TourOptimizerError(PlanningError):
    message = "Tour optimizer request failed"


class GeocodingError(PlanningError):
    message = "Geocoding request failed"


class StaleResultDiscarded(Exception):
    """
    Raised internally when a finished attempt is no longer the latest one.
    Never shown to the user.
    """

    def __init__(self, seq: int, latest_seq: int) -> None:
        self.seq = seq
        self.latest_seq = latest_seq
        super().__init__(f"Attempt #{seq} superseded by #{latest_seq}")
