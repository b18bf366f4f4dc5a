from dataclasses import replace

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from saferide.api.routes import navigation, routes
from saferide.config import settings
from saferide.main import create_app
from saferide.models.domain import RainTile
from saferide.services.navigation import IntervalClock, NavigationSessionStore
from saferide.services.outputs.formatter import route_summary
from saferide.services.routing import RouteUnreachable, build_minimal_route


class FakeClock:
    def __init__(self) -> None:
        self.running = False

    def start(self, callback) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False


class DummyAcquisition:
    calls: list = []
    error: Exception | None = None

    async def get_route(self, start_lng, start_lat, end_lng, end_lat, rain_avoidance=False):
        DummyAcquisition.calls.append((start_lng, start_lat, end_lng, end_lat, rain_avoidance))
        if DummyAcquisition.error is not None:
            raise DummyAcquisition.error
        return build_minimal_route(start_lng, start_lat, end_lng, end_lat)


@pytest.fixture
def acquisition(monkeypatch: pytest.MonkeyPatch):
    DummyAcquisition.calls = []
    DummyAcquisition.error = None
    monkeypatch.setattr(routes, "RouteAcquisition", DummyAcquisition)
    monkeypatch.setattr(navigation, "RouteAcquisition", DummyAcquisition)
    return DummyAcquisition


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> NavigationSessionStore:
    store = NavigationSessionStore(clock_factory=FakeClock)
    monkeypatch.setattr(navigation, "session_store", store)
    return store


@pytest.fixture
def api_client(acquisition, store):
    with TestClient(create_app()) as client:
        yield client


ROUTE_PARAMS = {"start_lng": 137.70, "start_lat": 34.70, "end_lng": 137.72, "end_lat": 34.72}


def _create_session(client: TestClient, **extra) -> dict:
    payload = {"end": {"lng": 137.72, "lat": 34.72}, **extra}
    response = client.post("/api/navigation/sessions", json=payload)
    assert response.status_code == 201
    return response.json()


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_diagnostics(api_client: TestClient):
    payload = api_client.get("/").json()

    assert payload["status"] == "running"
    assert payload["routing_backend"] == settings.routing_api_url


def test_route_endpoint(api_client: TestClient, acquisition):
    response = api_client.get("/api/routes", params={**ROUTE_PARAMS, "rain_avoidance": "true"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["route"]["source"] == "minimal"
    assert len(payload["route"]["coordinates"]) == 3
    assert payload["rain_overlay"] == {"type": "FeatureCollection", "features": []}
    assert payload["summary"]["crosses_rain"] is False
    assert acquisition.calls == [(137.70, 34.70, 137.72, 34.72, True)]


def test_route_endpoint_defaults_to_direct_routing(api_client: TestClient, acquisition):
    api_client.get("/api/routes", params=ROUTE_PARAMS)

    assert acquisition.calls[0][-1] is False


def test_unreachable_route_returns_user_message(api_client: TestClient, acquisition):
    acquisition.error = RouteUnreachable("backend said 400")

    response = api_client.get("/api/routes", params=ROUTE_PARAMS)

    assert response.status_code == 400
    assert response.json()["detail"] == RouteUnreachable.user_message


def test_route_endpoint_requires_coordinates(api_client: TestClient):
    response = api_client.get("/api/routes", params={"start_lng": 137.7})

    assert response.status_code == 422


def test_route_endpoint_rejects_out_of_range_latitude(api_client: TestClient):
    response = api_client.get("/api/routes", params={**ROUTE_PARAMS, "end_lat": 95})

    assert response.status_code == 422


def test_rain_overlay(api_client: TestClient):
    tiles = [{"x": 7229, "y": 3252, "zoom": 13}, {"x": 7229, "y": 3252, "zoom": 13}]

    response = api_client.post("/api/overlays/rain", json={"tiles": tiles})

    assert response.status_code == 200
    features = response.json()["features"]
    assert len(features) == 2
    assert features[0]["geometry"]["type"] == "Polygon"
    ring = features[0]["geometry"]["coordinates"][0]
    assert len(ring) == 5
    assert ring[0] == ring[-1]


def test_tile_polygon(api_client: TestClient):
    response = api_client.get("/api/overlays/tiles/0/0/0")

    assert response.status_code == 200
    ring = response.json()["coordinates"]
    assert ring[0] == pytest.approx([-180.0, 85.0511287798066])
    assert ring[2] == pytest.approx([180.0, -85.0511287798066])


def test_tile_polygon_rejects_negative_zoom(api_client: TestClient):
    assert api_client.get("/api/overlays/tiles/-1/0/0").status_code == 422


def test_tile_polygon_rejects_index_outside_grid(api_client: TestClient):
    response = api_client.get("/api/overlays/tiles/0/0/300")

    assert response.status_code == 400
    assert "outside" in response.json()["detail"]


@pytest.mark.parametrize("tile", [{"x": 0, "y": 0, "zoom": 1100}, {"x": 2, "y": 0, "zoom": 1}, {"x": -1, "y": 0, "zoom": 4}])
def test_rain_overlay_rejects_invalid_tiles(api_client: TestClient, tile):
    response = api_client.post("/api/overlays/rain", json={"tiles": [tile]})

    assert response.status_code == 422


def test_session_uses_device_position(api_client: TestClient, acquisition):
    _create_session(api_client, start={"lng": 1.0, "lat": 2.0}, device_position={"lng": 139.0, "lat": 35.0})

    assert acquisition.calls == [(139.0, 35.0, 137.72, 34.72, True)]


def test_session_falls_back_to_start_then_default(api_client: TestClient, acquisition):
    _create_session(api_client, start={"lng": 137.71, "lat": 34.71}, rain_avoidance=False)
    _create_session(api_client)

    default_lng, default_lat = settings.default_start
    assert acquisition.calls == [
        (137.71, 34.71, 137.72, 34.72, False),
        (default_lng, default_lat, 137.72, 34.72, True),
    ]


def test_session_lifecycle(api_client: TestClient, store: NavigationSessionStore):
    created = _create_session(api_client, start={"lng": 137.70, "lat": 34.70})
    session_id = created["session_id"]
    assert created["state"]["status"] == "idle"
    assert created["state"]["remaining_time"] == created["route"]["time"]
    assert created["summary"]["source"] == "minimal"

    base = f"/api/navigation/sessions/{session_id}"
    assert api_client.post(f"{base}/resume").status_code == 409

    started = api_client.post(f"{base}/start")
    assert started.status_code == 200
    assert started.json()["status"] == "running"
    assert api_client.post(f"{base}/start").status_code == 409

    store.get(session_id).simulator.tick()
    stopped = api_client.post(f"{base}/stop").json()
    assert stopped["status"] == "idle"
    assert stopped["coordinate_index"] == 1

    resumed = api_client.post(f"{base}/resume").json()
    assert resumed["status"] == "running"
    assert resumed["coordinate_index"] == 1
    assert api_client.get(base).json()["coordinate_index"] == 1

    assert api_client.delete(base).status_code == 204
    assert api_client.get(base).status_code == 404
    assert api_client.delete(base).status_code == 404
    assert len(store) == 0


def test_unknown_session_returns_404(api_client: TestClient):
    assert api_client.post("/api/navigation/sessions/missing/start").status_code == 404


def test_unreachable_session_route(api_client: TestClient, acquisition):
    acquisition.error = RouteUnreachable("backend said 400")

    response = api_client.post("/api/navigation/sessions", json={"end": {"lng": 137.72, "lat": 34.72}})

    assert response.status_code == 400
    assert response.json()["detail"] == RouteUnreachable.user_message


def test_stream_pushes_states_until_complete(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    store = NavigationSessionStore(clock_factory=lambda: IntervalClock(0.01))
    monkeypatch.setattr(navigation, "session_store", store)
    session_id = _create_session(api_client, start={"lng": 137.70, "lat": 34.70})["session_id"]

    assert api_client.post(f"/api/navigation/sessions/{session_id}/start").status_code == 200

    states = []
    with api_client.websocket_connect(f"/api/navigation/sessions/{session_id}/stream") as websocket:
        while True:
            state = websocket.receive_json()
            states.append(state)
            if state["is_complete"]:
                break

    assert states[-1]["status"] == "complete"
    assert states[-1]["progress_percent"] == 100
    progress = [state["progress_percent"] for state in states]
    assert progress == sorted(progress)


def test_stream_rejects_unknown_session(api_client: TestClient):
    with pytest.raises(WebSocketDisconnect):
        with api_client.websocket_connect("/api/navigation/sessions/missing/stream") as websocket:
            websocket.receive_json()


def test_rain_tile_summary_for_crossing_route():
    route = build_minimal_route(137.70, 34.70, 137.72, 34.72)
    tile = RainTile(x=7229, y=3252, zoom=13)

    assert route_summary(replace(route, rain_tiles=(tile,))).crosses_rain is True


def test_session_defaults_destination(api_client: TestClient, acquisition):
    response = api_client.post("/api/navigation/sessions", json={"start": {"lng": 137.70, "lat": 34.70}})

    assert response.status_code == 201
    end_lng, end_lat = settings.default_end
    assert acquisition.calls == [(137.70, 34.70, end_lng, end_lat, True)]


def test_stream_closes_when_session_deleted(api_client: TestClient):
    session_id = _create_session(api_client, start={"lng": 137.70, "lat": 34.70})["session_id"]
    base = f"/api/navigation/sessions/{session_id}"

    with api_client.websocket_connect(f"{base}/stream") as websocket:
        assert websocket.receive_json()["status"] == "idle"

        assert api_client.delete(base).status_code == 204

        assert websocket.receive_json()["status"] == "closed"
        with pytest.raises(WebSocketDisconnect):
            websocket.receive_json()
