# looproute/models/geo.py

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _LngLat(BaseModel):
    """
    A (longitude, latitude) pair in degrees.

    Not used directly: the display and provider reference systems each get
    their own subclass so that one can never be passed where the other is
    expected. Instances of different subclasses never compare equal.
    """
    model_config = ConfigDict(frozen=True)

    lng: float = Field(ge=-180.0, le=180.0)
    lat: float = Field(ge=-90.0, le=90.0)

    def as_pair(self) -> Tuple[float, float]:
        return (self.lng, self.lat)

    def as_param(self) -> str:
        """Render as the "lng,lat" string used in provider requests."""
        return f"{self.lng:.6f},{self.lat:.6f}"


class DisplayCoordinate(_LngLat):
    """Coordinate in the map display reference system."""


class ProviderCoordinate(_LngLat):
    """Coordinate in the routing/geocoding provider reference system."""


class Node(BaseModel):
    """
    A user waypoint, in display coordinates.

    A node has no durable id: its position in the node list is its identity.
    `name` is a display label, usually filled in by reverse geocoding.
    """
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    name: Optional[str] = None

    def coordinate(self) -> DisplayCoordinate:
        return DisplayCoordinate(lng=self.lng, lat=self.lat)
