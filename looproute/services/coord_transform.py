# looproute/services/coord_transform.py
"""
Conversion between the display and provider coordinate reference systems.

The provider system is the display system plus a non-linear, region
specific datum shift (Krasovsky 1940 ellipsoid). The shift only applies
inside a bounding box around the provider's service region; outside it
both conversions are the identity.

The inverse conversion is a first-order approximation: it evaluates the
forward shift at the already shifted point and subtracts it. The residual
error stays below 5 metres inside the box (a couple of metres around the
main cities), which is below what the routing provider itself snaps to roads.
"""

import math
from typing import Tuple

from looproute.models.geo import DisplayCoordinate, ProviderCoordinate

# Krasovsky 1940 ellipsoid
SEMI_MAJOR_AXIS = 6378245.0
ECCENTRICITY_SQ = 0.00669342162296594323

# Region where the provider shifts coordinates
MIN_LNG, MAX_LNG = 72.004, 137.8347
MIN_LAT, MAX_LAT = 0.8293, 55.8271


def _shift_lat(x: float, y: float) -> float:
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def _shift_lng(x: float, y: float) -> float:
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


def outside_shift_region(lng: float, lat: float) -> bool:
    return not (MIN_LNG <= lng <= MAX_LNG and MIN_LAT <= lat <= MAX_LAT)


def _forward_delta(lng: float, lat: float) -> Tuple[float, float]:
    """
    Shift (d_lng, d_lat) in degrees that the provider adds at (lng, lat).
    """
    d_lat = _shift_lat(lng - 105.0, lat - 35.0)
    d_lng = _shift_lng(lng - 105.0, lat - 35.0)

    rad_lat = lat / 180.0 * math.pi
    magic = math.sin(rad_lat)
    magic = 1 - ECCENTRICITY_SQ * magic * magic
    sqrt_magic = math.sqrt(magic)

    d_lat = (d_lat * 180.0) / ((SEMI_MAJOR_AXIS * (1 - ECCENTRICITY_SQ)) / (magic * sqrt_magic) * math.pi)
    d_lng = (d_lng * 180.0) / (SEMI_MAJOR_AXIS / sqrt_magic * math.cos(rad_lat) * math.pi)
    return d_lng, d_lat


def display_to_provider(lng: float, lat: float) -> Tuple[float, float]:
    if outside_shift_region(lng, lat):
        return lng, lat
    d_lng, d_lat = _forward_delta(lng, lat)
    return lng + d_lng, lat + d_lat


def provider_to_display(lng: float, lat: float) -> Tuple[float, float]:
    if outside_shift_region(lng, lat):
        return lng, lat
    # Treat the shifted point as if it were the original: 2*p - forward(p)
    d_lng, d_lat = _forward_delta(lng, lat)
    return lng * 2 - (lng + d_lng), lat * 2 - (lat + d_lat)


class CoordinateTransformer:
    """
    Typed front-end over the raw conversion functions.

    Both methods are pure and total; they only refuse a coordinate of the
    wrong reference system.
    """

    @staticmethod
    def to_provider(point: DisplayCoordinate) -> ProviderCoordinate:
        if not isinstance(point, DisplayCoordinate):
            raise TypeError(f"to_provider expects a DisplayCoordinate, got {type(point).__name__}")
        lng, lat = display_to_provider(point.lng, point.lat)
        return ProviderCoordinate(lng=lng, lat=lat)

    @staticmethod
    def to_display(point: ProviderCoordinate) -> DisplayCoordinate:
        if not isinstance(point, ProviderCoordinate):
            raise TypeError(f"to_display expects a ProviderCoordinate, got {type(point).__name__}")
        lng, lat = provider_to_display(point.lng, point.lat)
        return DisplayCoordinate(lng=lng, lat=lat)
