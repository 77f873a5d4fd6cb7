"""Point orchestration: optimistic edits, async resolution and result recomputation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Iterable, Optional

from pydantic import ValidationError

from ...config import settings
from ...models.domain import Coordinates, MapView, Mode, Point, Role, RouteResult
from ...persistence.filesystem import KeyValueStore, MemoryStore
from ...schemas.points import MapViewModel, PointModel
from ..geocoding.nominatim_client import NominatimGeocoder
from ..geospatial import format_coordinates, normalize_lng, point_bounds
from ..routing.resolver import RouteResolver
from .store import PointStore, generate_point_id

logger = logging.getLogger(__name__)

FETCHING_ADDRESS = "Fetching address..."
UPDATING_LOCATION = "Updating location..."

ORIGINS_KEY = "origins"
DESTINATIONS_KEY = "destinations"
MODE_KEY = "mode"
MAP_VIEW_KEY = "map_view"


def _normalized(coords: Optional[Coordinates]) -> Optional[Coordinates]:
    if coords is None:
        return None
    return Coordinates(lat=coords.lat, lng=normalize_lng(coords.lng), name=coords.name)


def _load_points(raw: Any) -> list[Point]:
    if not isinstance(raw, list):
        return []
    points: list[Point] = []
    for entry in raw:
        try:
            point = PointModel.model_validate(entry).to_domain()
        except ValidationError as exc:
            logger.warning(f"Skipping unreadable persisted point: {exc}")
            continue
        # a persisted loading flag has no request behind it any more
        points.append(point.evolve(coords=_normalized(point.coords), loading=False))
    return points


def _dump_points(points: Iterable[Point]) -> list[dict]:
    return [PointModel.from_domain(point).model_dump() for point in points]


class RouteGridSession:
    """Drives the point store from user intents and keeps the result matrix current.

    Async completions (geocodes, reverse geocodes, route passes) are always
    reconciled by point id against the *current* store snapshot. A completion
    for a point that has since been removed does nothing.

    Route results are recomputed after every change to the origins,
    destinations or mode. All pairs of a pass are resolved concurrently and
    the list is published in one assignment once every pair is done. A pass
    that has been superseded by a newer change is dropped.
    """

    def __init__(
        self,
        geocoder: NominatimGeocoder | None = None,
        resolver: RouteResolver | None = None,
        persistence: KeyValueStore | None = None,
        id_factory: Callable[[], str] = generate_point_id,
    ) -> None:
        self.geocoder = geocoder or NominatimGeocoder()
        self.resolver = resolver or RouteResolver()
        self.persistence = persistence if persistence is not None else MemoryStore()

        self.store = self._load_store(id_factory)
        self.map_view = self._load_map_view()
        self.results: tuple[RouteResult, ...] = ()
        self.fit_bounds_trigger = 0

        self._tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._stale = True
        self.store.subscribe(self._on_change)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load_store(self, id_factory: Callable[[], str]) -> PointStore:
        raw_mode = self.persistence.load(MODE_KEY)
        try:
            mode = Mode(raw_mode) if raw_mode is not None else Mode(settings.default_mode)
        except ValueError:
            logger.warning(f"Ignoring unknown persisted mode {raw_mode!r}")
            mode = Mode(settings.default_mode)
        return PointStore(
            origins=_load_points(self.persistence.load(ORIGINS_KEY)),
            destinations=_load_points(self.persistence.load(DESTINATIONS_KEY)),
            mode=mode,
            id_factory=id_factory,
        )

    def _load_map_view(self) -> MapView:
        raw = self.persistence.load(MAP_VIEW_KEY)
        if raw is None:
            return MapView()
        try:
            return MapViewModel.model_validate(raw).to_domain()
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable persisted map view: {exc}")
            return MapView()

    def _on_change(self, changed: frozenset[str]) -> None:
        # results follow the store even when saving fails
        self._schedule_recompute()
        try:
            if Role.ORIGIN.value in changed:
                self.persistence.save(ORIGINS_KEY, _dump_points(self.store.origins))
            if Role.DESTINATION.value in changed:
                self.persistence.save(DESTINATIONS_KEY, _dump_points(self.store.destinations))
            if MODE_KEY in changed:
                self.persistence.save(MODE_KEY, self.store.mode.value)
        except OSError:
            logger.exception(f"Failed to save changed state {sorted(changed)}")

    def set_map_view(self, center: tuple[float, float], zoom: int) -> MapView:
        self.map_view = MapView(center=(float(center[0]), float(center[1])), zoom=int(zoom))
        self.persistence.save(MAP_VIEW_KEY, MapViewModel.from_domain(self.map_view).model_dump(mode="json"))
        return self.map_view

    # ------------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------------
    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())

    async def settle(self) -> None:
        """Wait until every spawned task has finished and results describe the current state."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._stale:
            await self.recompute()

    def _schedule_recompute(self) -> None:
        self._generation += 1
        self._stale = True
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # no event loop yet; settle() or recompute() will catch up
            return
        self.spawn(self._recompute_pass(self._generation))

    async def recompute(self) -> tuple[RouteResult, ...]:
        self._generation += 1
        await self._recompute_pass(self._generation)
        return self.results

    async def _recompute_pass(self, generation: int) -> None:
        if generation != self._generation:
            return
        pairs = self.store.route_pairs()
        fragments = await asyncio.gather(
            *(self.resolver.resolve_route(origin.coords, destination.coords) for origin, destination in pairs)
        )
        if generation != self._generation:
            logger.debug(f"Discarding superseded route pass {generation} (latest {self._generation})")
            return
        self.results = tuple(
            RouteResult(
                origin=origin,
                destination=destination,
                distance=fragment.distance,
                path=fragment.path,
                is_road=fragment.is_road,
                error_reason=fragment.error_reason,
            )
            for (origin, destination), fragment in zip(pairs, fragments)
        )
        self._stale = False
        logger.info(f"Published {len(self.results)} route results ({self.store.mode.value})")

    # ------------------------------------------------------------------
    # Point operations
    # ------------------------------------------------------------------
    def add(self, role: Role) -> Optional[Point]:
        return self.store.add(role)

    def remove(self, point_id: str, role: Role) -> None:
        self.store.remove(point_id, role)

    def update_address(self, point_id: str, role: Role, text: str) -> Optional[Point]:
        return self.store.update_address(point_id, role, text)

    def set_mode(self, mode: Mode) -> None:
        self.store.set_mode(mode)

    def _signal_fit_bounds(self) -> None:
        self.fit_bounds_trigger += 1

    def bounds(self) -> Optional[tuple[float, float, float, float]]:
        return point_bounds(
            p.coords for p in (*self.store.origins, *self.store.destinations) if p.coords is not None
        )

    async def resolve_on_blur(self, point_id: str, role: Role) -> Optional[Point]:
        role = Role(role)
        point = self.store.find(role, point_id)
        if point is None or not point.address.strip():
            return point

        address = point.address
        self.store.patch(role, point_id, loading=True)
        try:
            coords = await self.geocoder.forward_geocode(address)
        except Exception:
            logger.exception(f"Geocoding {address!r} failed")
            coords = None

        current = self.store.find(role, point_id)
        if current is None:
            return None
        if current.address != address:
            # edited while the lookup was in flight; the answer is for the old text
            return self.store.patch(role, point_id, loading=False)
        committed = self.store.patch(role, point_id, loading=False, coords=_normalized(coords))
        if coords is not None:
            self._signal_fit_bounds()
        return committed

    def _place_from_map_click(self, lat: float, lng: float, role: Role) -> str:
        role = Role(role)
        target_id = self.store.map_click_target(role) or self.store.allocate_id()
        self.store.upsert(
            role,
            Point(
                id=target_id,
                address=FETCHING_ADDRESS,
                coords=Coordinates(lat=lat, lng=normalize_lng(lng)),
                loading=True,
            ),
        )
        self._signal_fit_bounds()
        return target_id

    async def _commit_reverse_geocode(self, role: Role, point_id: str, lat: float, lng: float) -> Optional[Point]:
        norm_lng = normalize_lng(lng)
        try:
            address = await self.geocoder.reverse_geocode(lat, norm_lng)
            final_address = address or format_coordinates(lat, norm_lng)
            return self.store.patch(
                role,
                point_id,
                address=final_address,
                coords=Coordinates(lat=lat, lng=norm_lng, name=final_address),
                loading=False,
            )
        except Exception:
            logger.exception(f"Reverse geocoding ({lat}, {norm_lng}) failed")
            return self.store.patch(role, point_id, address=format_coordinates(lat, norm_lng), loading=False)

    async def add_from_map_click(self, lat: float, lng: float, role: Role) -> Optional[Point]:
        target_id = self._place_from_map_click(lat, lng, role)
        return await self._commit_reverse_geocode(Role(role), target_id, lat, lng)

    def start_map_click(self, lat: float, lng: float, role: Role) -> str:
        """Apply the optimistic map click now and resolve its address in the background."""

        target_id = self._place_from_map_click(lat, lng, role)
        self.spawn(self._commit_reverse_geocode(Role(role), target_id, lat, lng))
        return target_id

    def _place_drag(self, point_id: str, lat: float, lng: float) -> Optional[Role]:
        role = self.store.owner_of(point_id)
        if role is None:
            return None
        self.store.patch(
            role,
            point_id,
            coords=Coordinates(lat=lat, lng=normalize_lng(lng)),
            address=UPDATING_LOCATION,
            loading=True,
        )
        return role

    async def move_via_drag(self, point_id: str, lat: float, lng: float) -> Optional[Point]:
        role = self._place_drag(point_id, lat, lng)
        if role is None:
            return None
        return await self._commit_reverse_geocode(role, point_id, lat, lng)

    def start_drag(self, point_id: str, lat: float, lng: float) -> Optional[Role]:
        role = self._place_drag(point_id, lat, lng)
        if role is not None:
            self.spawn(self._commit_reverse_geocode(role, point_id, lat, lng))
        return role
