"""Domain models for points, coordinates and route results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class Role(str, Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"


class Mode(str, Enum):
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A latitude/longitude pair with an optional display label."""

    lat: float
    lng: float
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Point:
    """A user-defined location belonging to the origin or destination role.

    Points are immutable; every edit produces a new value with the same ``id``.
    """

    id: str
    address: str = ""
    coords: Optional[Coordinates] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.address and self.coords is None

    def evolve(self, **changes) -> "Point":
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class MapView:
    center: tuple[float, float] = (20.0, 0.0)
    zoom: int = 2


@dataclass(frozen=True, slots=True)
class RouteResult:
    origin: Point
    destination: Point
    distance: float
    path: Optional[list[tuple[float, float]]] = field(default=None, compare=False)
    is_road: bool = False
    error_reason: Optional[str] = None
