"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...schemas.routing import RouteResponse, RoutingRequest
from ...services.outputs.routing_formatter import route_to_csv
from ...services.routing.osrm_client import OSRMError
from ...services.routing.service import persist_route
from ...services.session import RouteSession
from ..dependencies import get_route_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def optimize(
    payload: RoutingRequest,
    session: RouteSession = Depends(get_route_session),
) -> RouteResponse:
    try:
        route = await session.compute_route(
            payload.start_index,
            group=payload.group_by_code,
            distance_mode=payload.distance_mode,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OSRMError as exc:
        logger.exception(f"Error requesting trip from OSRM: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to optimize route: {exc}",
        ) from exc

    metadata: dict = {"status": "complete", "start_index": payload.start_index}
    if payload.persist:
        metadata["output_dir"] = persist_route(route)
    return RouteResponse.from_domain(route, session.tracker.delivered, metadata)


@router.get("/current", response_model=RouteResponse, status_code=status.HTTP_200_OK)
def current_route(session: RouteSession = Depends(get_route_session)) -> RouteResponse:
    if session.route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No route has been computed yet.")
    return RouteResponse.from_domain(session.route, session.tracker.delivered)


@router.get("/current/export.csv", status_code=status.HTTP_200_OK)
def export_current_route(session: RouteSession = Depends(get_route_session)) -> Response:
    if session.route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No route has been computed yet.")
    return Response(
        content=route_to_csv(session.route, session.tracker.delivered),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route.csv"'},
    )
