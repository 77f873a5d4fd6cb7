#!/usr/bin/env python3
"""Script to verify routing provider and geocoder connectivity."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from routegrid.config import settings
from routegrid.models.domain import Coordinates
from routegrid.services.geocoding import NominatimGeocoder
from routegrid.services.routing import OSRMClient, OutcomeKind, RouteResolver


async def main() -> int:
    print("=" * 60)
    print("Routing Provider Check")
    print("=" * 60)
    print()

    if not settings.routing_endpoints:
        print("   [ERROR] No routing endpoints configured (ROUTEGRID_ROUTING_ENDPOINTS)")
        return 1

    origin = Coordinates(lat=52.517037, lng=13.388860)
    destination = Coordinates(lat=52.496891, lng=13.385983)

    print("1. Querying each provider once...")
    for url in settings.routing_endpoints:
        outcome = await OSRMClient(url).attempt_route(origin, destination)
        if outcome.kind is OutcomeKind.OK:
            print(f"   [OK] {url}: {outcome.route.distance} km, {len(outcome.route.path)} path points")
        else:
            print(f"   [FAIL] {url}: {outcome.kind.value} ({outcome.reason})")
    print()

    print("2. Resolving through the full provider chain...")
    fragment = await RouteResolver().resolve_route(origin, destination)
    status = "road" if fragment.is_road else f"great-circle fallback ({fragment.error_reason})"
    print(f"   {fragment.distance} km via {status}")
    print()

    print("3. Reverse geocoding the origin...")
    label = await NominatimGeocoder().reverse_geocode(origin.lat, origin.lng)
    print(f"   {label}")
    return 0 if fragment.is_road else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
