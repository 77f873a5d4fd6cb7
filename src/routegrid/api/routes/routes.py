"""Route result endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from ...schemas.points import RouteRequest, RouteResponse, RouteResultModel
from ...services.outputs.results_formatter import route_results_to_csv, route_results_to_json
from ...services.points.session import RouteGridSession
from ..dependencies import get_session

router = APIRouter(tags=["routes"])


@router.get("/results", response_model=List[RouteResultModel], status_code=status.HTTP_200_OK)
async def get_results(
    wait: bool = Query(default=False, description="Wait for pending recomputation first."),
    session: RouteGridSession = Depends(get_session),
) -> List[dict]:
    if wait:
        await session.settle()
    return route_results_to_json(session.results)


@router.get("/results/export.csv", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
async def export_results(session: RouteGridSession = Depends(get_session)) -> PlainTextResponse:
    await session.settle()
    return PlainTextResponse(
        route_results_to_csv(session.results),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="routes.csv"'},
    )


@router.post("/routes/resolve", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def resolve_route(payload: RouteRequest, session: RouteGridSession = Depends(get_session)) -> RouteResponse:
    """Resolve a single pair without touching the stored points."""
    fragment = await session.resolver.resolve_route(payload.origin.to_domain(), payload.destination.to_domain())
    return RouteResponse(
        distance=fragment.distance,
        path=fragment.path,
        is_road=fragment.is_road,
        error_reason=fragment.error_reason,
    )
