"""HTTP client for a single OSRM-compatible routing provider."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...models.domain import Coordinates
from .models import OutcomeKind, ProviderOutcome, RouteFragment

logger = logging.getLogger(__name__)


class OSRMClient:
    """Talks to one OSRM ``route`` endpoint and classifies each response.

    ``base_url`` is the full route prefix, e.g.
    ``https://router.project-osrm.org/route/v1/driving``. The client never
    retries on its own; it reports a tagged :class:`ProviderOutcome` and
    leaves retry decisions to the resolver.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self._client = client

    def __repr__(self) -> str:
        return f"OSRMClient({self.base_url!r})"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=10.0))

    def route_url(self, origin: Coordinates, destination: Coordinates) -> str:
        # OSRM expects "lon,lat;lon,lat"
        return f"{self.base_url}/{origin.lng},{origin.lat};{destination.lng},{destination.lat}"

    async def attempt_route(self, origin: Coordinates, destination: Coordinates) -> ProviderOutcome:
        """Issue one route request and classify the response."""

        url = self.route_url(origin, destination)
        params = {"overview": "full", "geometries": "geojson"}

        client = self._get_client()
        try:
            response = await client.get(url, params=params)
            if response.status_code == 429:
                logger.warning(f"Routing provider {self.base_url} rate limited (429).")
                return ProviderOutcome(OutcomeKind.RATE_LIMITED, reason="429 Rate Limit")
            if not response.is_success:
                logger.warning(f"Routing request failed for {url} | Status: {response.status_code}")
                return ProviderOutcome(OutcomeKind.REJECTED, reason=str(response.status_code))
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Routing request to {self.base_url} failed: {exc}")
            return ProviderOutcome(OutcomeKind.NETWORK_ERROR, reason=str(exc) or "Network Error")
        finally:
            if client is not self._client:
                await client.aclose()

        return parse_route_payload(data)


def parse_route_payload(data: object) -> ProviderOutcome:
    """Map an OSRM ``route`` JSON body onto a provider outcome."""

    if not isinstance(data, dict):
        return ProviderOutcome(OutcomeKind.NETWORK_ERROR, reason="Malformed routing response")

    code = data.get("code")
    routes = data.get("routes") or []
    if code == "Ok" and routes:
        best = routes[0]
        try:
            distance_km = float(best["distance"]) / 1000.0
            path = [(float(lat), float(lng)) for lng, lat in best["geometry"]["coordinates"]]
        except (KeyError, TypeError, ValueError) as exc:
            return ProviderOutcome(OutcomeKind.NETWORK_ERROR, reason=f"Malformed route geometry: {exc}")
        return ProviderOutcome(
            OutcomeKind.OK,
            route=RouteFragment(distance=round(distance_km, 2), path=path, is_road=True),
        )
    if code == "NoRoute":
        return ProviderOutcome(OutcomeKind.REJECTED, reason="NoRoute")
    return ProviderOutcome(OutcomeKind.REJECTED, reason=f"API Code: {code}")


async def check_health(base_url: str, client: httpx.AsyncClient | None = None) -> bool:
    """Check a provider by routing between two fixed points in Berlin."""

    origin = Coordinates(lat=52.517037, lng=13.388860)
    destination = Coordinates(lat=52.496891, lng=13.385983)
    try:
        outcome = await OSRMClient(base_url, timeout=5.0, client=client).attempt_route(origin, destination)
    except ValueError:
        return False
    return outcome.kind is OutcomeKind.OK
