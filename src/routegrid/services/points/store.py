"""Origin/destination collections with id-keyed, snapshot-producing mutations."""

from __future__ import annotations

import uuid
from typing import Callable, Iterable, Optional

from ...models.domain import Mode, Point, Role

ChangeListener = Callable[[frozenset[str]], None]


class PointNotFoundError(LookupError):
    def __init__(self, point_id: str, role: Role | None = None) -> None:
        self.point_id = point_id
        self.role = role
        where = f" in {role.value}s" if role else ""
        super().__init__(f"Point '{point_id}' not found{where}.")


def generate_point_id() -> str:
    return uuid.uuid4().hex[:9]


class PointStore:
    """Owns the origin and destination collections and the pairing mode.

    Collections are tuples of immutable :class:`Point` values. Each mutation
    swaps in a new tuple, so two snapshots can be compared with ``==`` and a
    captured snapshot never changes under its holder. Every mutation that
    targets an existing point looks it up by id in the current snapshot and is
    a no-op when the id is gone.

    Invariants: neither collection is ever empty, and in ``one-to-many`` mode
    there is at most one origin.
    """

    def __init__(
        self,
        origins: Iterable[Point] | None = None,
        destinations: Iterable[Point] | None = None,
        mode: Mode = Mode.ONE_TO_MANY,
        id_factory: Callable[[], str] = generate_point_id,
    ) -> None:
        self._id_factory = id_factory
        self._listeners: list[ChangeListener] = []
        self._mode = Mode(mode)
        self._collections: dict[Role, tuple[Point, ...]] = {
            Role.ORIGIN: tuple(origins or ()) or (self.new_point(),),
            Role.DESTINATION: tuple(destinations or ()) or (self.new_point(),),
        }
        if self._mode is Mode.ONE_TO_MANY:
            self._collections[Role.ORIGIN] = self._collections[Role.ORIGIN][:1]

    # ------------------------------------------------------------------
    # Snapshots and lookups
    # ------------------------------------------------------------------
    @property
    def origins(self) -> tuple[Point, ...]:
        return self._collections[Role.ORIGIN]

    @property
    def destinations(self) -> tuple[Point, ...]:
        return self._collections[Role.DESTINATION]

    @property
    def mode(self) -> Mode:
        return self._mode

    def collection(self, role: Role) -> tuple[Point, ...]:
        return self._collections[Role(role)]

    def find(self, role: Role, point_id: str) -> Optional[Point]:
        return next((p for p in self.collection(role) if p.id == point_id), None)

    def require(self, role: Role, point_id: str) -> Point:
        point = self.find(role, point_id)
        if point is None:
            raise PointNotFoundError(point_id, Role(role))
        return point

    def owner_of(self, point_id: str) -> Optional[Role]:
        for role in (Role.ORIGIN, Role.DESTINATION):
            if self.find(role, point_id) is not None:
                return role
        return None

    def allocate_id(self) -> str:
        return self._id_factory()

    def new_point(self) -> Point:
        return Point(id=self.allocate_id())

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def _commit(self, role: Role, points: tuple[Point, ...]) -> bool:
        if points == self._collections[role]:
            return False
        self._collections[role] = points
        self._notify(frozenset({role.value}))
        return True

    def _notify(self, changed: frozenset[str]) -> None:
        for listener in list(self._listeners):
            listener(changed)

    def add(self, role: Role) -> Optional[Point]:
        role = Role(role)
        if role is Role.ORIGIN and self._mode is Mode.ONE_TO_MANY and self.origins:
            return None
        point = self.new_point()
        self._commit(role, self.collection(role) + (point,))
        return point

    def remove(self, point_id: str, role: Role) -> None:
        role = Role(role)
        points = self.collection(role)
        if len(points) > 1:
            self._commit(role, tuple(p for p in points if p.id != point_id))
        else:
            self._commit(
                role,
                tuple(
                    p.evolve(address="", coords=None, loading=False, error=None) if p.id == point_id else p
                    for p in points
                ),
            )

    def update_address(self, point_id: str, role: Role, text: str) -> Optional[Point]:
        """Set the typed address. Any previously resolved coordinates no longer apply."""

        return self.patch(role, point_id, address=text, coords=None)

    def patch(self, role: Role, point_id: str, **changes) -> Optional[Point]:
        """Apply ``changes`` to the point with ``point_id``; returns the new point or None if absent."""

        role = Role(role)
        points = self.collection(role)
        updated: Optional[Point] = None
        new_points = []
        for point in points:
            if point.id == point_id:
                updated = point.evolve(**changes)
                new_points.append(updated)
            else:
                new_points.append(point)
        if updated is None:
            return None
        self._commit(role, tuple(new_points))
        return updated

    def upsert(self, role: Role, point: Point) -> Point:
        """Replace the point sharing ``point.id`` or append it."""

        role = Role(role)
        points = self.collection(role)
        if any(p.id == point.id for p in points):
            self._commit(role, tuple(point if p.id == point.id else p for p in points))
        else:
            self._commit(role, points + (point,))
        return point

    def set_mode(self, mode: Mode) -> None:
        mode = Mode(mode)
        changed = {"mode"} if mode is not self._mode else set()
        self._mode = mode
        if mode is Mode.ONE_TO_MANY and len(self.origins) > 1:
            self._collections[Role.ORIGIN] = self.origins[:1]
            changed.add(Role.ORIGIN.value)
        if changed:
            self._notify(frozenset(changed))

    # ------------------------------------------------------------------
    # Pairing
    # ------------------------------------------------------------------
    def map_click_target(self, role: Role) -> Optional[str]:
        """Id of the point a map click should overwrite, or None to append a new one."""

        role = Role(role)
        points = self.collection(role)
        for point in points:
            if point.is_empty:
                return point.id
        if role is Role.ORIGIN and self._mode is Mode.ONE_TO_MANY and points:
            return points[0].id
        return None

    def route_pairs(self) -> list[tuple[Point, Point]]:
        """Resolved (origin, destination) pairs for the current mode, origin-major."""

        destinations = [d for d in self.destinations if d.coords is not None]
        if self._mode is Mode.ONE_TO_MANY:
            origins = [o for o in self.origins[:1] if o.coords is not None]
        else:
            origins = [o for o in self.origins if o.coords is not None]
        return [(origin, destination) for origin in origins for destination in destinations]
