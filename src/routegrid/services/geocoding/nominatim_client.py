"""HTTP client for a Nominatim-compatible geocoding service."""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from ...config import settings
from ...models.domain import Coordinates
from ..geospatial import format_coordinates, is_finite_coordinates, normalize_lng

logger = logging.getLogger(__name__)

# "<lat>,<lng>" typed directly into an address field, e.g. "40.7128, -74.0060"
COORDINATE_PATTERN = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*,\s*([+-]?\d+(?:\.\d+)?)\s*$")


def parse_coordinate_literal(address: str) -> Coordinates | None:
    match = COORDINATE_PATTERN.match(address)
    if not match:
        return None
    return Coordinates(lat=float(match.group(1)), lng=float(match.group(2)), name=address)


class NominatimGeocoder:
    """Resolves addresses to coordinates and back.

    Forward lookups signal a miss with ``None``. Reverse lookups never fail:
    when the service has nothing to say the coordinates themselves are
    returned as the label.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.user_agent = user_agent or settings.geocoder_user_agent
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self.timeout, headers={"User-Agent": self.user_agent})

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        client = self._get_client()
        try:
            response = await client.get(
                f"{self.base_url}/{path}",
                params=params,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            return response.json()
        finally:
            if client is not self._client:
                await client.aclose()

    async def forward_geocode(self, address: str) -> Coordinates | None:
        literal = parse_coordinate_literal(address)
        if literal is not None:
            return literal

        try:
            data = await self._get_json("search", {"format": "json", "q": address})
            if not data:
                logger.info("Geocoding returned no results for %r", address)
                return None
            first = data[0]
            coords = Coordinates(
                lat=float(first["lat"]),
                lng=float(first["lon"]),
                name=first.get("display_name"),
            )
            if not is_finite_coordinates(coords):
                logger.warning("Geocoding returned non-finite coordinates for %r", address)
                return None
            return coords
        except httpx.HTTPError as exc:
            logger.warning(f"Geocoding request failed for {address!r}: {exc}")
            return None
        except (ValueError, KeyError, TypeError, IndexError) as exc:
            logger.warning(f"Malformed geocoding response for {address!r}: {exc}")
            return None

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        normalized_lng = normalize_lng(lng)
        fallback = format_coordinates(lat, normalized_lng)
        try:
            data = await self._get_json(
                "reverse",
                {"format": "json", "lat": lat, "lon": normalized_lng},
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Reverse geocoding failed for ({lat}, {normalized_lng}): {exc}")
            return fallback
        except ValueError as exc:
            logger.warning(f"Malformed reverse geocoding response for ({lat}, {normalized_lng}): {exc}")
            return fallback

        if not isinstance(data, dict):
            return fallback
        if data.get("error"):
            logger.debug("Reverse geocoding reported no data: %s", data["error"])
            return fallback
        label = data.get("display_name")
        if label:
            return str(label)
        return fallback
