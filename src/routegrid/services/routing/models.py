"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class OutcomeKind(str, Enum):
    OK = "ok"
    RATE_LIMITED = "rate_limited"
    REJECTED = "rejected"
    NETWORK_ERROR = "network_error"


@dataclass(slots=True)
class RouteFragment:
    distance: float
    path: List[tuple[float, float]]
    is_road: bool
    error_reason: Optional[str] = None


@dataclass(slots=True)
class ProviderOutcome:
    """Result of a single request against one routing provider."""

    kind: OutcomeKind
    route: Optional[RouteFragment] = None
    reason: Optional[str] = None

    @property
    def retryable(self) -> bool:
        return self.kind in (OutcomeKind.RATE_LIMITED, OutcomeKind.NETWORK_ERROR)
