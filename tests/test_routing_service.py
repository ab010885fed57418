import asyncio

import pytest

from src.courier.config import settings
from src.courier.data.waypoints_repository import parse_rows
from src.courier.persistence.session_store import InMemorySessionStore
from src.courier.services.routing.osrm_client import OSRMError
from src.courier.services.routing.service import plan_route
from src.courier.services.session import RouteSession

ROWS = [
    {"Stop": 1, "Sequence": 1, "Latitude": 10, "Longitude": 20, "Destination Address": "A"},
    {"Stop": 2, "Sequence": 2, "Latitude": 10.1, "Longitude": 20.1, "Destination Address": "B", "Zipcode": "Z1"},
    {"Stop": 3, "Sequence": 3, "Latitude": 10.2, "Longitude": 20.2, "Destination Address": "C", "Zipcode": "Z1"},
]

TRIP_RESPONSE = {
    "code": "Ok",
    "trips": [
        {
            # OSRM answers in [lng, lat]
            "geometry": {"coordinates": [[20, 10], [20.2, 10.2], [20.1, 10.1]]},
            "legs": [{"distance": 500}, {"distance": 300}],
        }
    ],
}


class DummyOSRM:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response if response is not None else TRIP_RESPONSE
        self.error = error
        self.calls = 0

    async def trip(self, coordinates):
        self.calls += 1
        if self.error:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def default_pipeline_settings(monkeypatch):
    monkeypatch.setattr(settings, "group_by_code", False)
    monkeypatch.setattr(settings, "distance_mode", "leg")


def test_end_to_end_example_without_grouping():
    route = asyncio.run(plan_route(parse_rows(ROWS), 0, client=DummyOSRM()))

    assert [w.stop_id for w in route.waypoints] == [1, 3, 2]
    assert [w.distance_from_previous for w in route.waypoints] == [None, 500.0, 300.0]
    assert route.geometry == ((10, 20), (10.2, 20.2), (10.1, 20.1))


def test_end_to_end_example_with_grouping():
    route = asyncio.run(plan_route(parse_rows(ROWS), 0, client=DummyOSRM(), group=True))

    assert [w.stop_id for w in route.waypoints] == [1, 3, 2]
    assert [w.distance_from_previous for w in route.waypoints] == [None, 500.0, 300.0]


def test_grouping_reorder_keeps_leg_by_position():
    rows = [
        {"Stop": 1, "Sequence": 1, "Latitude": 10, "Longitude": 20, "Zipcode": "Z1"},
        {"Stop": 2, "Sequence": 2, "Latitude": 10.1, "Longitude": 20.1},
        {"Stop": 3, "Sequence": 3, "Latitude": 10.2, "Longitude": 20.2, "Zipcode": "Z1"},
    ]
    response = {
        "code": "Ok",
        "trips": [
            {
                "geometry": {"coordinates": [[20, 10], [20.1, 10.1], [20.2, 10.2]]},
                "legs": [{"distance": 111}, {"distance": 222}],
            }
        ],
    }

    route = asyncio.run(plan_route(parse_rows(rows), 0, client=DummyOSRM(response), group=True))

    assert [w.stop_id for w in route.waypoints] == [1, 3, 2]
    assert [w.distance_from_previous for w in route.waypoints] == [None, 111.0, 222.0]


def test_single_waypoint_skips_network():
    client = DummyOSRM()

    route = asyncio.run(plan_route(parse_rows(ROWS[:1]), 0, client=client))

    assert client.calls == 0
    assert [w.stop_id for w in route.waypoints] == [1]
    assert route.geometry == ()
    assert route.waypoints[0].distance_from_previous is None


def test_missing_trip_keeps_submitted_order():
    client = DummyOSRM(response={"code": "NoTrips"})

    route = asyncio.run(plan_route(parse_rows(ROWS), 2, client=client))

    assert [w.stop_id for w in route.waypoints] == [3, 1, 2]
    assert route.geometry == ()
    assert [w.distance_from_previous for w in route.waypoints] == [None, 0.0, 0.0]


def test_session_keeps_previous_route_when_oracle_fails():
    store = InMemorySessionStore()
    session = RouteSession(store, DummyOSRM())
    session.load_waypoints(parse_rows(ROWS))
    first = asyncio.run(session.compute_route(0))
    session.toggle_delivered(1)

    session.client = DummyOSRM(error=OSRMError("timeout"))
    with pytest.raises(OSRMError):
        asyncio.run(session.compute_route(0))

    assert session.route is first
    assert session.tracker.delivered == frozenset({1})


def test_session_resets_delivery_state_on_new_route_and_new_data():
    session = RouteSession(InMemorySessionStore(), DummyOSRM())
    session.load_waypoints(parse_rows(ROWS))
    asyncio.run(session.compute_route(0))
    session.toggle_delivered(0)

    asyncio.run(session.compute_route(0))
    assert session.tracker.delivered == frozenset()

    session.toggle_delivered(2)
    session.load_waypoints(parse_rows(ROWS))
    assert session.tracker.delivered == frozenset()
    assert session.route is None


def test_session_next_stop_links_to_navigation():
    session = RouteSession(InMemorySessionStore(), DummyOSRM())
    session.load_waypoints(parse_rows(ROWS))
    asyncio.run(session.compute_route(0))
    session.toggle_delivered(0)

    upcoming = session.next_stop()

    assert upcoming.position == 1
    assert upcoming.waypoint.stop_id == 3
    assert upcoming.navigation_url == "https://www.google.com/maps/dir/?api=1&destination=10.2,20.2"

    session.toggle_delivered(1)
    session.toggle_delivered(2)
    assert session.next_stop() is None


def test_session_rejects_out_of_route_positions_and_empty_data():
    session = RouteSession(InMemorySessionStore(), DummyOSRM())

    with pytest.raises(ValueError):
        asyncio.run(session.compute_route(0))
    with pytest.raises(LookupError):
        session.toggle_delivered(0)

    session.load_waypoints(parse_rows(ROWS))
    asyncio.run(session.compute_route(0))
    with pytest.raises(IndexError):
        session.toggle_delivered(3)
