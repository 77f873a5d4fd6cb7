"""Route resolution across an ordered chain of routing providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinates
from ..geospatial import great_circle_distance, is_finite_coordinates, normalize_lng
from .models import OutcomeKind, RouteFragment
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)

INVALID_COORDINATES_REASON = "Invalid Coordinates (NaN)"


def _straight_line(c1: Coordinates, c2: Coordinates, reason: str | None) -> RouteFragment:
    return RouteFragment(
        distance=great_circle_distance(c1, c2),
        path=[(c1.lat, c1.lng), (c2.lat, c2.lng)],
        is_road=False,
        error_reason=reason,
    )


class RouteResolver:
    """Resolves a road route between two points, falling back to great-circle distance.

    Providers are tried in order. Each gets up to ``max_attempts`` requests:
    rate limits wait ``rate_limit_backoff * attempt`` and retry, network errors
    wait ``network_retry_delay`` and retry, every other failure moves on to
    the next provider. The result is always usable; when no provider answers
    the fragment carries the last failure as ``error_reason``.
    """

    def __init__(
        self,
        providers: Sequence[OSRMClient] | None = None,
        max_attempts: int | None = None,
        rate_limit_backoff: float | None = None,
        network_retry_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if providers is None:
            providers = [OSRMClient(url) for url in settings.routing_endpoints]
        self.providers = list(providers)
        self.max_attempts = max_attempts if max_attempts is not None else settings.routing_max_attempts
        self.rate_limit_backoff = (
            rate_limit_backoff if rate_limit_backoff is not None else settings.routing_rate_limit_backoff_seconds
        )
        self.network_retry_delay = (
            network_retry_delay if network_retry_delay is not None else settings.routing_network_retry_seconds
        )
        self._sleep = sleep

    @classmethod
    def from_endpoints(
        cls, endpoints: Sequence[str], client: httpx.AsyncClient | None = None, **kwargs
    ) -> "RouteResolver":
        return cls([OSRMClient(url, client=client) for url in endpoints], **kwargs)

    async def _try_provider(
        self, provider: OSRMClient, c1: Coordinates, c2: Coordinates
    ) -> tuple[RouteFragment | None, str | None]:
        attempt = 0
        last_reason: str | None = None
        while attempt < self.max_attempts:
            outcome = await provider.attempt_route(c1, c2)
            if outcome.kind is OutcomeKind.OK:
                return outcome.route, None
            last_reason = outcome.reason
            if not outcome.retryable:
                break
            attempt += 1
            if outcome.kind is OutcomeKind.RATE_LIMITED:
                await self._sleep(self.rate_limit_backoff * attempt)
            elif attempt < self.max_attempts:
                logger.debug(
                    f"Retrying {provider.base_url} in {self.network_retry_delay:.1f}s "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                await self._sleep(self.network_retry_delay)
        return None, last_reason

    async def resolve_route(self, c1: Coordinates, c2: Coordinates) -> RouteFragment:
        if not (is_finite_coordinates(c1) and is_finite_coordinates(c2)):
            logger.error(f"Invalid/NaN coordinates: {c1} {c2}")
            return _straight_line(c1, c2, INVALID_COORDINATES_REASON)

        c1 = Coordinates(lat=c1.lat, lng=normalize_lng(c1.lng), name=c1.name)
        c2 = Coordinates(lat=c2.lat, lng=normalize_lng(c2.lng), name=c2.name)

        last_error = "No Attempts"
        for provider in self.providers:
            route, reason = await self._try_provider(provider, c1, c2)
            if route is not None:
                return route
            if reason:
                last_error = reason

        logger.warning(f"All routing attempts failed: {last_error}. Using great-circle fallback.")
        # fallback path uses the normalized longitudes, matching what the store holds
        return _straight_line(c1, c2, last_error)
