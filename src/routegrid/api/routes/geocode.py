"""Geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.points import CoordinatesModel, ReverseGeocodeResponse
from ...services.geospatial import normalize_lng
from ...services.points.session import RouteGridSession
from ..dependencies import get_session

router = APIRouter(prefix="/geocode", tags=["geocode"])


@router.get("/search", response_model=CoordinatesModel, status_code=status.HTTP_200_OK)
async def search(
    q: str = Query(..., min_length=1, description="Free-text address or a 'lat, lng' pair"),
    session: RouteGridSession = Depends(get_session),
) -> CoordinatesModel:
    coords = await session.geocoder.forward_geocode(q)
    if coords is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No location found for '{q}'.")
    return CoordinatesModel(lat=coords.lat, lng=normalize_lng(coords.lng), name=coords.name)


@router.get("/reverse", response_model=ReverseGeocodeResponse, status_code=status.HTTP_200_OK)
async def reverse(
    lat: float = Query(..., ge=-90, le=90, allow_inf_nan=False),
    lng: float = Query(..., allow_inf_nan=False),
    session: RouteGridSession = Depends(get_session),
) -> ReverseGeocodeResponse:
    address = await session.geocoder.reverse_geocode(lat, normalize_lng(lng))
    return ReverseGeocodeResponse(lat=lat, lng=normalize_lng(lng), address=address)
