"""Origin/destination distance matrix service."""

__version__ = "0.1.0"
