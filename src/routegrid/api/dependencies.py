"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ..services.points.session import RouteGridSession


def get_session(request: Request) -> RouteGridSession:
    return request.app.state.session
