"""Application level behaviour: health, index, error bodies, CORS, throttling and response headers."""

from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from conftest import FakeClock, make_settings
from fitcoach_api.app.main import create_app


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["timestamp"].startswith("2024-11-01T08:00:00")
    assert body["uptime"] >= 0
    assert body["environment"] == "development"


def test_api_index_lists_endpoints(client):
    body = client.get("/api").json()
    assert body["message"] == "Welcome to FitCoach Pro API"
    assert body["endpoints"]["clients"] == "/api/clients"
    assert body["endpoints"]["ios"] == "/api/ios"
    assert body["documentation"] == "/docs"


def test_unknown_route(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found", "message": "Route /api/does-not-exist not found"}


def test_malformed_json_is_a_validation_error(client):
    resp = client.post(
        "/api/auth/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"


def test_unexpected_errors_do_not_leak_details():
    app = create_app(make_settings(secret_key="top-secret-value"), clock=FakeClock())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("top-secret-value")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        resp = test_client.get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error", "message": "An unexpected error occurred"}
    assert "top-secret-value" not in resp.text


def test_cors_preflight(client):
    resp = client.options(
        "/api/clients",
        headers={"Origin": "capacitor://localhost", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "capacitor://localhost"


def test_cors_ignores_unknown_origin(client):
    resp = client.get("/health", headers={"Origin": "https://evil.example"})
    assert "access-control-allow-origin" not in resp.headers


def test_rate_limit():
    app = create_app(make_settings(rate_limit="2 per minute", rate_limit_enabled=True), clock=FakeClock())
    with TestClient(app) as test_client:
        assert test_client.get("/api").status_code == 200
        assert test_client.get("/api/ios/ios-health").status_code == 200
        resp = test_client.get("/api")
    assert resp.status_code == 429
    assert resp.json()["error"] == "Too many requests"


def test_each_app_has_its_own_store(auth_headers, client):
    client.delete("/api/clients/1", headers=auth_headers)
    fresh = create_app(make_settings(), clock=FakeClock())
    with TestClient(fresh) as other:
        resp = other.post("/api/auth/login", json={"email": "coach@fitcoachpro.com", "password": "coach123"})
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        assert other.get("/api/clients/1", headers=headers).json()["data"]["status"] == "active"


def test_empty_store_without_fixtures():
    app = create_app(make_settings(seed_fixtures=False), clock=FakeClock())
    with TestClient(app) as test_client:
        resp = test_client.post("/api/auth/login", json={"email": "coach@fitcoachpro.com", "password": "coach123"})
    assert resp.status_code == 401


def test_health_is_never_throttled():
    app = create_app(make_settings(rate_limit="2 per minute", rate_limit_enabled=True), clock=FakeClock())
    with TestClient(app) as test_client:
        statuses = [test_client.get("/health").status_code for _ in range(5)]
        assert statuses == [200] * 5
        # The API itself is still limited.
        assert [test_client.get("/api").status_code for _ in range(3)] == [200, 200, 429]


def test_security_headers_are_set(client):
    resp = client.get("/health")
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert "camera=()" in resp.headers["permissions-policy"]
    assert resp.headers["strict-transport-security"].startswith("max-age=31536000")
    assert "default-src 'self'" in resp.headers["content-security-policy"]


def test_security_headers_on_error_responses(client):
    resp = client.get("/api/clients")
    assert resp.status_code == 401
    assert resp.headers["x-frame-options"] == "DENY"


def test_debug_mode_skips_transport_headers():
    app = create_app(make_settings(debug=True), clock=FakeClock())
    with TestClient(app) as test_client:
        resp = test_client.get("/health")
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert "strict-transport-security" not in resp.headers
    assert "content-security-policy" not in resp.headers


def test_large_responses_are_gzipped():
    app = create_app(make_settings(gzip_minimum_size=100), clock=FakeClock())
    with TestClient(app) as test_client:
        resp = test_client.get("/api", headers={"Accept-Encoding": "gzip"})
    assert resp.status_code == 200
    assert resp.headers["content-encoding"] == "gzip"
    assert resp.json()["endpoints"]["clients"] == "/api/clients"


def test_small_responses_are_not_compressed(client):
    resp = client.get("/health", headers={"Accept-Encoding": "gzip"})
    assert "content-encoding" not in resp.headers


def test_unexpected_error_logs_one_traceback(caplog):
    app = create_app(make_settings(), clock=FakeClock())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with caplog.at_level(logging.INFO):
        with TestClient(app, raise_server_exceptions=False) as test_client:
            assert test_client.get("/boom").status_code == 500

    with_traceback = [record for record in caplog.records if record.exc_info]
    assert len(with_traceback) == 1
    assert with_traceback[0].name == "fitcoach_api.app.core.errors"
    summary = [record.getMessage() for record in caplog.records if record.name == "fitcoach_api.app.main"]
    assert any(message.startswith("GET /boom -> 500") for message in summary)
