"""HTTP tests for the iOS companion endpoints."""

from __future__ import annotations

import pytest

DEVICE_TOKEN = "a1b2c3d4" + "0" * 56
OTHER_TOKEN = "ffeeddcc" + "1" * 56


def _register(client, headers, token=DEVICE_TOKEN):
    return client.post(
        "/api/ios/register-device",
        headers=headers,
        json={"deviceToken": token, "platform": "ios", "appVersion": "1.2.0", "osVersion": "17.4"},
    )


def test_register_device(client, auth_headers):
    resp = _register(client, auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["userId"] == "1"
    assert body["data"]["registrationId"]


@pytest.mark.parametrize(
    "payload",
    [
        {"deviceToken": "short", "platform": "ios"},
        {"deviceToken": DEVICE_TOKEN + "0", "platform": "ios"},
        {"deviceToken": DEVICE_TOKEN, "platform": "android"},
        {"deviceToken": DEVICE_TOKEN},
    ],
)
def test_register_device_validation(client, auth_headers, payload):
    resp = client.post("/api/ios/register-device", headers=auth_headers, json=payload)
    assert resp.status_code == 400


def test_register_requires_token(client):
    assert client.post("/api/ios/register-device", json={"deviceToken": DEVICE_TOKEN, "platform": "ios"}).status_code == 401


def test_send_notification_without_device(client, auth_headers):
    resp = client.post("/api/ios/send-notification", headers=auth_headers, json={"title": "Hi", "message": "There"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "No device registration found for user"


def test_send_notification_is_delivered_to_the_sink(client, app, auth_headers):
    _register(client, auth_headers)
    resp = client.post(
        "/api/ios/send-notification",
        headers=auth_headers,
        json={"title": "Session reminder", "message": "Leg day at 11:00", "data": {"workoutId": "2"}},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["deviceToken"] == "a1b2c3d4..."
    assert data["notificationId"]

    sent = app.state.services.notifications.sent
    assert len(sent) == 1
    assert sent[0].id == data["notificationId"]
    assert sent[0].status == "sent"
    assert sent[0].device_token == DEVICE_TOKEN
    assert sent[0].data == {"workoutId": "2"}


def test_send_notification_to_another_user(client, app, auth_headers, other_coach_headers):
    _register(client, other_coach_headers, OTHER_TOKEN)
    other_id = client.get("/api/auth/profile", headers=other_coach_headers).json()["user"]["id"]

    resp = client.post(
        "/api/ios/send-notification",
        headers=auth_headers,
        json={"userId": other_id, "title": "Welcome", "message": "Glad to have you"},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["deviceToken"] == "ffeeddcc..."
    assert app.state.services.notifications.sent[-1].user_id == other_id


@pytest.mark.parametrize(
    "payload",
    [{"title": "", "message": "x"}, {"title": "x" * 101, "message": "x"}, {"title": "x", "message": "y" * 201}],
)
def test_send_notification_validation(client, auth_headers, payload):
    _register(client, auth_headers)
    assert client.post("/api/ios/send-notification", headers=auth_headers, json=payload).status_code == 400


def test_registering_again_replaces_the_device(client, app, auth_headers):
    _register(client, auth_headers)
    _register(client, auth_headers, OTHER_TOKEN)
    client.post("/api/ios/send-notification", headers=auth_headers, json={"title": "Hi", "message": "There"})
    assert app.state.services.notifications.sent[-1].device_token == OTHER_TOKEN
    assert client.get("/api/ios/ios-health").json()["registeredDevices"] == 1


def test_unregister_device(client, auth_headers):
    _register(client, auth_headers)
    first = client.delete("/api/ios/unregister-device", headers=auth_headers)
    assert first.status_code == 200
    assert first.json()["removed"] is True

    second = client.delete("/api/ios/unregister-device", headers=auth_headers)
    assert second.json()["removed"] is False

    resp = client.post("/api/ios/send-notification", headers=auth_headers, json={"title": "Hi", "message": "There"})
    assert resp.status_code == 404


def test_app_config(client, auth_headers):
    assert client.get("/api/ios/app-config").status_code == 401
    data = client.get("/api/ios/app-config", headers=auth_headers).json()["data"]
    assert data["apiVersion"] == "1.0.0"
    assert data["features"]["pushNotifications"] is True
    assert data["endpoints"]["baseUrl"].endswith("/api")
    assert [t["id"] for t in data["workoutTypes"]] == ["strength", "cardio", "flexibility", "sports", "rehabilitation"]


def test_ios_health_needs_no_token(client):
    resp = client.get("/api/ios/ios-health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["platform"] == "ios"
    assert body["registeredDevices"] == 0


def test_full_sync_without_last_sync(client, auth_headers):
    resp = client.get("/api/ios/sync", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    data = body["data"]
    assert len(data["clients"]["updated"]) == 3
    assert len(data["workouts"]["updated"]) == 3
    assert data["profile"]["updated"]["name"] == "John Coach"
    assert body["nextSync"] > data["timestamp"]


def test_incremental_sync(client, auth_headers, clock):
    clock.advance(hours=1)
    client.delete("/api/clients/2", headers=auth_headers)
    client.put("/api/workouts/3", headers=auth_headers, json={"notes": "Bring water"})

    resp = client.get("/api/ios/sync?lastSync=2024-11-01T08:00:00Z", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["clients"]["updated"] == []
    assert data["clients"]["deleted"] == ["2"]
    assert [w["id"] for w in data["workouts"]["updated"]] == ["3"]
    assert data["workouts"]["deleted"] == []
    assert data["profile"]["updated"] is None


def test_sync_rejects_bad_timestamp(client, auth_headers):
    assert client.get("/api/ios/sync?lastSync=yesterday", headers=auth_headers).status_code == 400
