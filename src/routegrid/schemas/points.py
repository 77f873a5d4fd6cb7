"""Point, result and session request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinates, MapView, Point, RouteResult

ModeName = Literal["one-to-many", "many-to-many"]
RoleName = Literal["origin", "destination"]


class CoordinatesModel(BaseModel):
    lat: float = Field(..., allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)
    name: Optional[str] = None

    @classmethod
    def from_domain(cls, coords: Coordinates) -> "CoordinatesModel":
        return cls(lat=coords.lat, lng=coords.lng, name=coords.name)

    def to_domain(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng, name=self.name)


class PointModel(BaseModel):
    id: str
    address: str = ""
    coords: Optional[CoordinatesModel] = None
    loading: bool = False
    error: Optional[str] = None

    @classmethod
    def from_domain(cls, point: Point) -> "PointModel":
        return cls(
            id=point.id,
            address=point.address,
            coords=CoordinatesModel.from_domain(point.coords) if point.coords else None,
            loading=point.loading,
            error=point.error,
        )

    def to_domain(self) -> Point:
        return Point(
            id=self.id,
            address=self.address,
            coords=self.coords.to_domain() if self.coords else None,
            loading=self.loading,
            error=self.error,
        )


class RouteResultModel(BaseModel):
    origin: PointModel
    destination: PointModel
    distance: float = Field(..., description="Distance in kilometres, two decimals.")
    path: Optional[List[tuple[float, float]]] = None
    is_road: bool = False
    error_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, result: RouteResult) -> "RouteResultModel":
        return cls(
            origin=PointModel.from_domain(result.origin),
            destination=PointModel.from_domain(result.destination),
            distance=result.distance,
            path=result.path,
            is_road=result.is_road,
            error_reason=result.error_reason,
        )


class MapViewModel(BaseModel):
    center: tuple[float, float] = (20.0, 0.0)
    zoom: int = Field(default=2, ge=0, le=22)

    @classmethod
    def from_domain(cls, view: MapView) -> "MapViewModel":
        return cls(center=view.center, zoom=view.zoom)

    def to_domain(self) -> MapView:
        return MapView(center=self.center, zoom=self.zoom)


class BoundsModel(BaseModel):
    south: float
    west: float
    north: float
    east: float


class SessionState(BaseModel):
    mode: ModeName
    origins: List[PointModel]
    destinations: List[PointModel]
    results: List[RouteResultModel]
    map_view: MapViewModel
    fit_bounds_trigger: int = Field(..., description="Incremented whenever the map should refit to all points.")
    bounds: Optional[BoundsModel] = None


class AddressUpdateRequest(BaseModel):
    address: str


class MapClickRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)
    role: RoleName


class DragRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)


class ModeRequest(BaseModel):
    mode: ModeName


class RouteRequest(BaseModel):
    origin: CoordinatesModel
    destination: CoordinatesModel


class RouteResponse(BaseModel):
    distance: float
    path: List[tuple[float, float]]
    is_road: bool
    error_reason: Optional[str] = None


class ReverseGeocodeResponse(BaseModel):
    lat: float
    lng: float
    address: str
