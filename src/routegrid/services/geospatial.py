"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..models.domain import Coordinates

EARTH_RADIUS_KM = 6371.0


def normalize_lng(lng: float) -> float:
    """Wrap a longitude into [-180, 180)."""

    if -180 <= lng < 180:
        return lng
    return ((lng + 180) % 360 + 360) % 360 - 180


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def great_circle_distance(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in kilometres, rounded to two decimals; NaN when either point is not finite."""

    if not (is_finite_coordinates(a) and is_finite_coordinates(b)):
        return math.nan
    return round(haversine_km(a.lat, a.lng, b.lat, b.lng), 2)


def is_finite_coordinates(coords: Coordinates) -> bool:
    try:
        return math.isfinite(coords.lat) and math.isfinite(coords.lng)
    except TypeError:
        return False


def format_coordinates(lat: float, lng: float) -> str:
    """Fallback display label used when no address is available for a location."""

    return f"{lat:.6f}, {normalize_lng(lng):.6f}"


def point_bounds(coords: Iterable[Coordinates]) -> Optional[tuple[float, float, float, float]]:
    """Return (south, west, north, east) around the given coordinates, or None if empty."""

    items = list(coords)
    if not items:
        return None
    lats = [c.lat for c in items]
    lngs = [c.lng for c in items]
    return (min(lats), min(lngs), max(lats), max(lngs))
