"""Serializers for route result matrices."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import RouteResult
from ...schemas.points import RouteResultModel


def route_results_to_json(results: Sequence[RouteResult]) -> list[dict]:
    return [RouteResultModel.from_domain(result).model_dump() for result in results]


def route_results_to_csv(results: Sequence[RouteResult]) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "index",
        "origin_id",
        "origin_address",
        "origin_lat",
        "origin_lng",
        "destination_id",
        "destination_address",
        "destination_lat",
        "destination_lng",
        "distance_km",
        "is_road",
        "error_reason",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for index, result in enumerate(results, start=1):
        origin, destination = result.origin, result.destination
        writer.writerow(
            {
                "index": index,
                "origin_id": origin.id,
                "origin_address": origin.address or "Origin",
                "origin_lat": origin.coords.lat if origin.coords else "",
                "origin_lng": origin.coords.lng if origin.coords else "",
                "destination_id": destination.id,
                "destination_address": destination.address or "Destination",
                "destination_lat": destination.coords.lat if destination.coords else "",
                "destination_lng": destination.coords.lng if destination.coords else "",
                "distance_km": f"{result.distance:.2f}",
                "is_road": result.is_road,
                "error_reason": result.error_reason or "",
            }
        )
    return buffer.getvalue()
