"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from ..services.session import RouteSession


def get_route_session(request: Request) -> RouteSession:
    return request.app.state.route_session
