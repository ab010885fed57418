import httpx
import pytest
from fastapi.testclient import TestClient

from src.courier.main import create_app
from src.courier.persistence.session_store import InMemorySessionStore
from src.courier.services.routing import osrm_client
from src.courier.services.session import RouteSession


class DummyOSRM:
    async def trip(self, coordinates):
        return {"code": "Ok", "trips": []}


def _fake_get(response=None, error: Exception | None = None):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        if error is not None:
            raise error
        return response

    fake_get.calls = calls
    return fake_get


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", "http://osrm.test/trip"), **kwargs)


def test_check_health_true_when_trip_is_ok(monkeypatch):
    fake_get = _fake_get(_response(json={"code": "Ok", "trips": []}))
    monkeypatch.setattr(osrm_client.httpx, "get", fake_get)

    assert osrm_client.check_health("http://osrm.test/") is True
    assert fake_get.calls[0].startswith("http://osrm.test/trip/v1/")


def test_check_health_false_on_connection_error(monkeypatch):
    error = httpx.ConnectError("connection refused", request=httpx.Request("GET", "http://osrm.test"))
    monkeypatch.setattr(osrm_client.httpx, "get", _fake_get(error=error))

    assert osrm_client.check_health("http://osrm.test") is False


def test_check_health_false_on_non_json_body(monkeypatch):
    monkeypatch.setattr(osrm_client.httpx, "get", _fake_get(_response(text="<html>maintenance</html>")))

    assert osrm_client.check_health("http://osrm.test") is False


def test_check_health_false_on_error_status(monkeypatch):
    monkeypatch.setattr(osrm_client.httpx, "get", _fake_get(_response(500, json={"code": "Error"})))

    assert osrm_client.check_health("http://osrm.test") is False


def test_check_health_false_without_base_url(monkeypatch):
    monkeypatch.setattr(osrm_client.settings, "osrm_base_url", None)

    assert osrm_client.check_health() is False


@pytest.mark.parametrize("trip_code, healthy", [("Ok", True), ("InvalidUrl", False)])
def test_health_osrm_endpoint(monkeypatch, trip_code, healthy):
    monkeypatch.setattr(osrm_client.httpx, "get", _fake_get(_response(json={"code": trip_code})))
    client = TestClient(create_app(session=RouteSession(InMemorySessionStore(), DummyOSRM())))

    response = client.get("/api/health/osrm")

    assert response.status_code == 200
    assert response.json() == {"service": "osrm", "healthy": healthy}
