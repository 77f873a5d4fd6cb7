"""Point, mode and map interaction endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Mode, Role
from ...schemas.points import (
    AddressUpdateRequest,
    BoundsModel,
    DragRequest,
    MapClickRequest,
    MapViewModel,
    ModeRequest,
    PointModel,
    RouteResultModel,
    SessionState,
)
from ...services.points.session import RouteGridSession
from ...services.points.store import PointNotFoundError
from ..dependencies import get_session

router = APIRouter(tags=["points"])

RoleParam = Literal["origin", "destination"]
WAIT_DESCRIPTION = "Wait for geocoding and route recomputation before responding."


def build_session_state(session: RouteGridSession) -> SessionState:
    bounds = session.bounds()
    return SessionState(
        mode=session.store.mode.value,
        origins=[PointModel.from_domain(p) for p in session.store.origins],
        destinations=[PointModel.from_domain(p) for p in session.store.destinations],
        results=[RouteResultModel.from_domain(r) for r in session.results],
        map_view=MapViewModel.from_domain(session.map_view),
        fit_bounds_trigger=session.fit_bounds_trigger,
        bounds=BoundsModel(south=bounds[0], west=bounds[1], north=bounds[2], east=bounds[3]) if bounds else None,
    )


async def _respond(session: RouteGridSession, wait: bool) -> SessionState:
    if wait:
        await session.settle()
    return build_session_state(session)


def _require(session: RouteGridSession, role: Role, point_id: str) -> None:
    try:
        session.store.require(role, point_id)
    except PointNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/state", response_model=SessionState, status_code=status.HTTP_200_OK)
async def get_state(
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    return await _respond(session, wait)


@router.post("/points/{role}", response_model=SessionState, status_code=status.HTTP_201_CREATED)
async def add_point(
    role: RoleParam,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    if session.add(Role(role)) is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only one origin is allowed in one-to-many mode.",
        )
    return await _respond(session, wait)


@router.patch("/points/{role}/{point_id}", response_model=SessionState, status_code=status.HTTP_200_OK)
async def update_point_address(
    role: RoleParam,
    point_id: str,
    payload: AddressUpdateRequest,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    _require(session, Role(role), point_id)
    session.update_address(point_id, Role(role), payload.address)
    return await _respond(session, wait)


@router.delete("/points/{role}/{point_id}", response_model=SessionState, status_code=status.HTTP_200_OK)
async def remove_point(
    role: RoleParam,
    point_id: str,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    _require(session, Role(role), point_id)
    session.remove(point_id, Role(role))
    return await _respond(session, wait)


@router.post("/points/{role}/{point_id}/resolve", response_model=SessionState, status_code=status.HTTP_200_OK)
async def resolve_point(
    role: RoleParam,
    point_id: str,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    """Geocode the typed address of a point, as when its input field loses focus."""
    _require(session, Role(role), point_id)
    await session.resolve_on_blur(point_id, Role(role))
    return await _respond(session, wait)


@router.post("/points/{point_id}/drag", response_model=SessionState, status_code=status.HTTP_200_OK)
async def drag_point(
    point_id: str,
    payload: DragRequest,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    if session.start_drag(point_id, payload.lat, payload.lng) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Point '{point_id}' not found.")
    return await _respond(session, wait)


@router.post("/map/click", response_model=SessionState, status_code=status.HTTP_200_OK)
async def map_click(
    payload: MapClickRequest,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    session.start_map_click(payload.lat, payload.lng, Role(payload.role))
    return await _respond(session, wait)


@router.get("/map/view", response_model=MapViewModel, status_code=status.HTTP_200_OK)
def get_map_view(session: RouteGridSession = Depends(get_session)) -> MapViewModel:
    return MapViewModel.from_domain(session.map_view)


@router.put("/map/view", response_model=MapViewModel, status_code=status.HTTP_200_OK)
def set_map_view(payload: MapViewModel, session: RouteGridSession = Depends(get_session)) -> MapViewModel:
    return MapViewModel.from_domain(session.set_map_view(payload.center, payload.zoom))


@router.put("/mode", response_model=SessionState, status_code=status.HTTP_200_OK)
async def set_mode(
    payload: ModeRequest,
    wait: bool = Query(default=False, description=WAIT_DESCRIPTION),
    session: RouteGridSession = Depends(get_session),
) -> SessionState:
    session.set_mode(Mode(payload.mode))
    return await _respond(session, wait)
