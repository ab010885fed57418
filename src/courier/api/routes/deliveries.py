"""Delivery tracking endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.routing import DeliveryStateResponse, NextStopResponse, ToggleResponse, WaypointModel
from ...services.session import RouteSession
from ..dependencies import get_route_session

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _route_length(session: RouteSession) -> int:
    if session.route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No route has been computed yet.")
    return len(session.route)


@router.get("", response_model=DeliveryStateResponse, status_code=status.HTTP_200_OK)
def delivery_state(session: RouteSession = Depends(get_route_session)) -> DeliveryStateResponse:
    total = _route_length(session)
    return DeliveryStateResponse(
        delivered=sorted(session.tracker.delivered),
        next_pending=session.tracker.next_pending(total),
        total=total,
    )


@router.post("/{position}/toggle", response_model=ToggleResponse, status_code=status.HTTP_200_OK)
def toggle_delivery(position: int, session: RouteSession = Depends(get_route_session)) -> ToggleResponse:
    total = _route_length(session)
    try:
        delivered = session.toggle_delivered(position)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ToggleResponse(
        position=position,
        delivered=delivered,
        next_pending=session.tracker.next_pending(total),
    )


@router.get("/next", response_model=NextStopResponse, status_code=status.HTTP_200_OK)
def next_stop(session: RouteSession = Depends(get_route_session)) -> NextStopResponse:
    _route_length(session)
    upcoming = session.next_stop()
    if upcoming is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="All stops have been delivered.")
    return NextStopResponse(
        position=upcoming.position,
        stop=WaypointModel.from_domain(upcoming.waypoint),
        navigation_url=upcoming.navigation_url,
    )
