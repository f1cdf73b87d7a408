"""
Tests for the capture HTTP API.
"""

import pytest
from starlette.testclient import TestClient

from logcap.capture.controller import CaptureController
from logcap.server import create_app

from conftest import FakeLauncher


@pytest.fixture
def client(controller):
    app = create_app(controller)
    with TestClient(app) as c:
        yield c


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["active_sessions"] == 0


class TestStartRoute:
    def test_start_simulator(self, client, registry):
        resp = client.post(
            "/captures",
            json={"target_kind": "simulator", "target_id": "SIM-1", "bundle_id": "com.x"},
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] in registry
        assert data["log_file_path"].endswith(".log")
        assert "Log capture started successfully" in data["message"]

    def test_target_kind_defaults_to_simulator(self, client, registry):
        resp = client.post("/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"})

        assert resp.status_code == 200
        session = registry.lookup(resp.json()["session_id"])
        assert session.target_kind.value == "simulator"

    def test_missing_fields(self, client):
        resp = client.post("/captures", json={"target_kind": "simulator"})
        assert resp.status_code == 400

    def test_invalid_json(self, client):
        resp = client.post(
            "/captures", content=b"not json", headers={"content-type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid JSON body"

    def test_device_structured_only_rejected(self, client, registry):
        resp = client.post(
            "/captures",
            json={
                "target_kind": "device",
                "target_id": "DEV-1",
                "bundle_id": "com.x",
                "capture_mode": "structured-only",
            },
        )

        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_request"
        assert len(registry) == 0

    def test_spawn_failure(self, registry, store):
        controller = CaptureController(
            registry, store=store, launcher=FakeLauncher(fail_on="OS Log Capture")
        )
        with TestClient(create_app(controller)) as client:
            resp = client.post(
                "/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"}
            )

        assert resp.status_code == 500
        assert resp.json()["kind"] == "spawn_failure"


class TestStopRoute:
    def test_stop(self, client, registry):
        sid = client.post(
            "/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"}
        ).json()["session_id"]

        resp = client.post(f"/captures/{sid}/stop")

        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == sid
        assert "bundle ID: com.x" in data["log_content"]
        assert sid not in registry

    def test_stop_unknown(self, client):
        resp = client.post("/captures/nope/stop")

        assert resp.status_code == 404
        assert resp.json()["error"] == "Log capture session not found: nope"

    def test_stop_wrong_kind(self, client, registry):
        sid = client.post(
            "/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"}
        ).json()["session_id"]

        resp = client.post(f"/captures/{sid}/stop", json={"target_kind": "device"})

        assert resp.status_code == 404
        assert resp.json()["error"] == f"Device log capture session not found: {sid}"
        assert sid in registry


class TestListRoute:
    def test_list(self, client):
        client.post("/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"})
        client.post(
            "/captures",
            json={"target_kind": "device", "target_id": "DEV-1", "bundle_id": "com.y"},
        )

        resp = client.get("/captures")

        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 2
        kinds = {s["target_kind"] for s in data["sessions"]}
        assert kinds == {"simulator", "device"}
        assert all(s["running"] for s in data["sessions"])

    def test_list_empty(self, client):
        resp = client.get("/captures")
        assert resp.json() == {"sessions": [], "count": 0}


class TestCrossOrigin:
    PREFLIGHT = {
        "Origin": "https://elsewhere.example",
        "Access-Control-Request-Method": "POST",
    }

    def test_no_cors_by_default(self, controller):
        with TestClient(create_app(controller, cors_origins=[])) as client:
            preflight = client.options("/captures", headers=self.PREFLIGHT)
            resp = client.post(
                "/captures",
                json={"target_id": "SIM-1", "bundle_id": "com.x"},
                headers={"Origin": "https://elsewhere.example"},
            )

        assert "access-control-allow-origin" not in preflight.headers
        assert "access-control-allow-origin" not in resp.headers

    def test_default_comes_from_config(self, controller, monkeypatch):
        from logcap.config import CONFIG

        monkeypatch.setattr(CONFIG, "cors_origins", [])
        with TestClient(create_app(controller)) as client:
            preflight = client.options("/captures", headers=self.PREFLIGHT)

        assert "access-control-allow-origin" not in preflight.headers

    def test_configured_origin_only(self, controller):
        app = create_app(controller, cors_origins=["http://localhost:3000"])
        with TestClient(app) as client:
            allowed = client.options(
                "/captures",
                headers={
                    "Origin": "http://localhost:3000",
                    "Access-Control-Request-Method": "POST",
                },
            )
            denied = client.options("/captures", headers=self.PREFLIGHT)

        assert allowed.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "access-control-allow-origin" not in denied.headers


class TestNotInitialized:
    @pytest.fixture
    def bare_client(self):
        # No lifespan: the controller is never created
        return TestClient(create_app())

    def test_start_returns_503(self, bare_client):
        resp = bare_client.post(
            "/captures", json={"target_id": "SIM-1", "bundle_id": "com.x"}
        )
        assert resp.status_code == 503
        assert resp.json()["error"] == "Capture system not initialized"

    def test_stop_returns_503(self, bare_client):
        resp = bare_client.post("/captures/abc/stop")
        assert resp.status_code == 503
        assert resp.json()["error"] == "Capture system not initialized"

    def test_health_reports_starting(self, bare_client):
        data = bare_client.get("/health").json()
        assert data["status"] == "starting"
        assert data["active_sessions"] == 0
