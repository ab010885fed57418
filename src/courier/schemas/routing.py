"""Routing request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Route, Waypoint


class WaypointModel(BaseModel):
    stop_id: int
    sequence: int
    lat: float
    lng: float
    address: str = ""
    tracking_code: Optional[str] = None
    grouping_code: Optional[str] = None
    distance_from_previous: Optional[float] = Field(
        default=None, description="Metres from the previous stop; absent for the first stop."
    )

    @classmethod
    def from_domain(cls, waypoint: Waypoint) -> "WaypointModel":
        return cls(
            stop_id=waypoint.stop_id,
            sequence=waypoint.sequence,
            lat=waypoint.lat,
            lng=waypoint.lng,
            address=waypoint.address,
            tracking_code=waypoint.tracking_code,
            grouping_code=waypoint.grouping_code,
            distance_from_previous=waypoint.distance_from_previous,
        )


class WaypointRowsRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(..., description="Spreadsheet rows keyed by column header.")


class WaypointsResponse(BaseModel):
    received_rows: Optional[int] = None
    waypoints: List[WaypointModel]


class RoutingRequest(BaseModel):
    start_index: int = Field(default=0, ge=0, description="Index of the starting stop in the loaded waypoints.")
    group_by_code: Optional[bool] = Field(
        default=None,
        description="Keep stops with the same postal code together. Defaults to the server setting.",
    )
    distance_mode: Optional[Literal["leg", "haversine"]] = None
    persist: bool = Field(default=False, description="Write summary.json and stops.csv under the data root.")


class RouteResponse(BaseModel):
    stops: List[WaypointModel]
    geometry: List[List[float]] = Field(default_factory=list, description="Path polyline as [lat, lng] pairs.")
    total_distance_m: float
    delivered: List[int] = Field(default_factory=list)
    metadata: dict = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, route: Route, delivered=(), metadata: dict | None = None) -> "RouteResponse":
        return cls(
            stops=[WaypointModel.from_domain(w) for w in route.waypoints],
            geometry=[[lat, lng] for lat, lng in route.geometry],
            total_distance_m=route.total_distance,
            delivered=sorted(delivered),
            metadata=metadata or {},
        )


class DeliveryStateResponse(BaseModel):
    delivered: List[int]
    next_pending: Optional[int] = None
    total: int


class ToggleResponse(BaseModel):
    position: int
    delivered: bool
    next_pending: Optional[int] = None


class NextStopResponse(BaseModel):
    position: int
    stop: WaypointModel
    navigation_url: str
