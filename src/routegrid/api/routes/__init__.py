"""Route group exports."""

from . import geocode, health, points, routes

__all__ = ["geocode", "health", "points", "routes"]
