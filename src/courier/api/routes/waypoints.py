"""Waypoint ingestion endpoints."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ...data.waypoints_repository import parse_rows, read_workbook_rows
from ...schemas.routing import WaypointModel, WaypointRowsRequest, WaypointsResponse
from ...services.session import RouteSession
from ..dependencies import get_route_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/waypoints", tags=["waypoints"])


def _response(session: RouteSession, received_rows: int | None = None) -> WaypointsResponse:
    return WaypointsResponse(
        received_rows=received_rows,
        waypoints=[WaypointModel.from_domain(w) for w in session.waypoints],
    )


@router.get("", response_model=WaypointsResponse, status_code=status.HTTP_200_OK)
def list_waypoints(session: RouteSession = Depends(get_route_session)) -> WaypointsResponse:
    return _response(session)


@router.post("", response_model=WaypointsResponse, status_code=status.HTTP_201_CREATED)
def load_waypoint_rows(
    payload: WaypointRowsRequest,
    session: RouteSession = Depends(get_route_session),
) -> WaypointsResponse:
    """Load already-decoded spreadsheet rows."""
    session.load_waypoints(parse_rows(payload.rows))
    return _response(session, received_rows=len(payload.rows))


@router.post("/upload", response_model=WaypointsResponse, status_code=status.HTTP_201_CREATED)
async def upload_waypoints(
    file: UploadFile = File(...),
    session: RouteSession = Depends(get_route_session),
) -> WaypointsResponse:
    """Upload an .xlsx stop list; replaces the loaded stops and clears the route."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")

    suffix = Path(file.filename).suffix.lower()
    if suffix != ".xlsx":
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail="Only .xlsx files are supported.")

    try:
        rows = read_workbook_rows(await file.read())
    except (zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        logger.warning(f"Unreadable workbook '{file.filename}': {exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not read workbook '{file.filename}': {exc}",
        ) from exc

    session.load_waypoints(parse_rows(rows))
    return _response(session, received_rows=len(rows))
