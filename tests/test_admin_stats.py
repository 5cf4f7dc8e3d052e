from unittest.mock import patch

from tests.helpers import register_device, signup, subscribe


def test_stats_require_bearer(client):
    assert client.get("/api/admin/stats").status_code == 401


def test_stats_shape_and_counts(client, api_headers):
    _, headers = signup(client, "a@example.com")
    subscribe(client, headers, "PRO")
    _, other = signup(client, "b@example.com")
    subscribe(client, other, "FREE")

    device = register_device(client, "cam-1", name="Hall cam")
    register_device(client, "cam-2")
    client.post("/api/app/devices/claim", json={"deviceId": "cam-1"}, headers=headers)

    resident = client.post("/api/residents", json={"name": "Nana", "room": "4"}, headers=api_headers).json()["created"]
    client.patch(f"/api/residents/{resident['id']}/assign-device", json={"deviceId": device["id"]}, headers=api_headers)
    client.post("/api/events", json={"residentId": resident["id"], "type": "Fall", "confidence": 0.91}, headers=api_headers)
    client.post("/api/events", json={"elderly": "Guest", "room": "Hall", "type": "Fall", "confidence": 0.5}, headers=api_headers)

    stats = client.get("/api/admin/stats", headers=headers).json()

    assert stats["ok"] is True
    assert stats["errors"] == []
    assert stats["totalHouseholdAdmins"] == 2
    assert stats["activeProSubscriptions"] == 1
    assert stats["totalDevices"] == 2
    assert stats["alertsToday"] == 2

    guest, nana = stats["recentAlerts"]
    assert guest["displayName"] == "Guest"
    assert guest["deviceId"] is None
    assert nana["displayName"] == "Nana"
    assert nana["residentName"] == "Nana"
    assert nana["confidencePercent"] == 91
    assert nana["deviceId"] == "cam-1"
    assert nana["deviceName"] == "Hall cam"
    assert nana["ownerEmail"] == "a@example.com"


def test_failing_metric_is_reported_not_raised(client):
    _, headers = signup(client)

    with patch(
        "repositories.subscription.SubscriptionRepository.count_active_pro",
        side_effect=RuntimeError("boom"),
    ):
        response = client.get("/api/admin/stats", headers=headers)

    stats = response.json()
    assert response.status_code == 200
    assert stats["activeProSubscriptions"] is None
    assert stats["errors"] == ["activeProSubscriptions"]
    assert stats["totalHouseholdAdmins"] == 1
