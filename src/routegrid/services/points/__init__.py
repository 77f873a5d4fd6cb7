"""Point state and orchestration services."""

from .session import RouteGridSession
from .store import PointNotFoundError, PointStore

__all__ = ["PointNotFoundError", "PointStore", "RouteGridSession"]
