"""Routing services."""

from .models import OutcomeKind, ProviderOutcome, RouteFragment
from .osrm_client import OSRMClient, check_health
from .resolver import RouteResolver

__all__ = [
    "OSRMClient",
    "OutcomeKind",
    "ProviderOutcome",
    "RouteFragment",
    "RouteResolver",
    "check_health",
]
