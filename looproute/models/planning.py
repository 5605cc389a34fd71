# looproute/models/planning.py

from typing import List, Optional

from pydantic import BaseModel, Field

from looproute.models.geo import DisplayCoordinate, Node


class PlaceCandidate(BaseModel):
    """
    One place-search hit, already in display coordinates.
    """
    place_name: str
    center: DisplayCoordinate


class NodeCreate(BaseModel):
    """
    Request body for adding a node.

    If `label` is true and no name is given, the node is named by reverse
    geocoding its position.
    """
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    name: Optional[str] = None
    label: bool = False


class NodeMove(BaseModel):
    """
    Move the node at `src` so it ends up at position `dst`.
    """
    src: int = Field(ge=0)
    dst: int = Field(ge=0)


class NodeList(BaseModel):
    nodes: List[Node]
    revision: int


class PlanRequest(BaseModel):
    """
    Request body for the /plan endpoint.
    """
    # Ask the external optimizer for a visiting order first
    optimize: bool = False


class RouteGeometry(BaseModel):
    """
    Geometry of the route as a GeoJSON-like LineString.

    coordinates is a list of [lng, lat] pairs in display coordinates, which
    is what the map renderer consumes directly.
    """
    type: str = "LineString"
    coordinates: List[List[float]]

    @classmethod
    def from_polyline(cls, polyline: List[DisplayCoordinate]) -> "RouteGeometry":
        return cls(coordinates=[[p.lng, p.lat] for p in polyline])


class PlanResponse(BaseModel):
    """
    Response for the /plan endpoint.
    """
    status: str
    seq: int
    nodes: List[Node]
    tour: Optional[List[int]] = None
    geometry: RouteGeometry
    message: Optional[str] = None


class RouteState(BaseModel):
    """
    The route currently published to the map.
    """
    geometry: RouteGeometry
    error: Optional[str] = None
