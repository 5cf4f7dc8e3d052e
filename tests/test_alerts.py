import pytest

from core.exceptions import ValidationError
from services.alert_lifecycle import normalize_confidence, parse_status, to_percent
from tests.helpers import register_device, signup, subscribe


def _resident(client, api_headers, name="Grandma Lee", room="101"):
    return client.post("/api/residents", json={"name": name, "room": room}, headers=api_headers).json()["created"]


def _event(client, api_headers, **payload):
    return client.post("/api/events", json=payload, headers=api_headers)


@pytest.mark.parametrize("raw, expected", [(0.97, 0.97), (1, 1.0), (0, 0.0), (97, 0.97), (100, 1.0)])
def test_normalize_confidence(raw, expected):
    assert normalize_confidence(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [-0.1, 100.5, "abc"])
def test_normalize_confidence_rejects_out_of_range(raw):
    with pytest.raises(ValidationError):
        normalize_confidence(raw)


def test_to_percent():
    assert to_percent(0.973) == 97
    assert to_percent(1.0) == 100
    assert to_percent(85) == 85


@pytest.mark.parametrize("raw, expected", [
    ("new", "New"),
    ("ACKNOWLEDGED", "Acknowledged"),
    ("acknowledge", "Acknowledged"),
    (" Checked ", "Acknowledged"),
    ("resolved", "Resolved"),
])
def test_parse_status_synonyms(raw, expected):
    assert parse_status(raw) == expected


def test_parse_status_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_status("done")


def test_event_from_resident_snapshots_name_and_device(client, api_headers):
    resident = _resident(client, api_headers)
    device = register_device(client, "cam-1")
    client.patch(f"/api/residents/{resident['id']}/assign-device", json={"deviceId": device["id"]}, headers=api_headers)

    response = _event(client, api_headers, residentId=resident["id"], type="Fall detected", confidence=0.97)

    assert response.status_code == 200
    alert = response.json()["alert"]
    assert alert["elderly"] == "Grandma Lee"
    assert alert["room"] == "101"
    assert alert["status"] == "New"
    assert alert["source"] == "pi"
    assert alert["confidencePercent"] == 97
    assert alert["deviceId"] == "cam-1"
    assert alert["displayName"] == "Grandma Lee"
    assert alert["residentExists"] is True
    assert alert["time"].endswith(("AM", "PM"))


def test_event_manual_snapshot_links_resident_by_name(client, api_headers):
    resident = _resident(client, api_headers, "Uncle Bo", "5")
    alert = _event(client, api_headers, elderly="Uncle Bo", room="Garden", type="Fall detected", confidence=85).json()["alert"]

    assert alert["residentId"] == resident["id"]
    assert alert["room"] == "Garden"
    assert alert["confidence"] == pytest.approx(0.85)
    assert alert["confidencePercent"] == 85


def test_event_manual_without_resident(client, api_headers):
    alert = _event(
        client, api_headers,
        elderly="Visitor", room="Lobby", type="Fall detected", confidence=0.5,
        time="03:20 PM", source="camera", mediaUrl="https://cdn.example/clip.mp4",
    ).json()["alert"]

    assert alert["residentId"] is None
    assert alert["residentExists"] is False
    assert alert["displayName"] == "Visitor"
    assert alert["time"] == "03:20 PM"
    assert alert["source"] == "camera"
    assert alert["mediaUrl"] == "https://cdn.example/clip.mp4"


def test_event_validation(client, api_headers):
    unknown = _event(client, api_headers, residentId=404, type="Fall", confidence=0.9)
    assert unknown.status_code == 400
    assert unknown.json()["error"] == "residentId not found"

    missing = _event(client, api_headers, elderly="X", room="Y", type="Fall")
    assert missing.status_code == 400
    assert missing.json()["error"] == "Required: type, confidence, and (residentId OR elderly+room)"

    bad_device = _event(client, api_headers, elderly="X", room="Y", type="Fall", confidence=0.5, deviceId="ghost")
    assert bad_device.status_code == 400

    too_high = _event(client, api_headers, elderly="X", room="Y", type="Fall", confidence=250)
    assert too_high.status_code == 400


def test_events_require_api_key(client):
    response = client.post("/api/events", json={"elderly": "X", "room": "Y", "type": "Fall", "confidence": 1})
    assert response.status_code == 401


def test_post_alerts_is_the_same_ingestion(client, api_headers):
    response = client.post(
        "/api/alerts",
        json={"elderly": "X", "room": "Y", "type": "Fall", "confidence": 1.0, "deviceId": "cam-9"},
        headers=api_headers,
    )
    assert response.status_code == 400

    register_device(client, "cam-9")
    response = client.post(
        "/api/alerts",
        json={"elderly": "X", "room": "Y", "type": "Fall", "confidence": 1.0, "deviceId": "cam-9"},
        headers=api_headers,
    )
    assert response.status_code == 200
    assert response.json()["alert"]["deviceId"] == "cam-9"
    assert response.json()["alert"]["confidencePercent"] == 100


def test_list_latest_and_detail(client, api_headers):
    assert client.get("/api/alerts/latest", headers=api_headers).json() == []

    first = _event(client, api_headers, elderly="A", room="1", type="Fall", confidence=0.6).json()["alert"]
    second = _event(client, api_headers, elderly="B", room="2", type="Fall", confidence=0.7).json()["alert"]

    listed = client.get("/api/alerts", headers=api_headers).json()
    assert [a["id"] for a in listed] == [second["id"], first["id"]]

    latest = client.get("/api/alerts/latest", headers=api_headers).json()
    assert len(latest) == 1
    assert latest[0]["id"] == second["id"]

    detail = client.get(f"/api/alerts/{first['id']}", headers=api_headers).json()
    assert detail["residentDisplayName"] == "Resident deleted"
    assert client.get("/api/alerts/999", headers=api_headers).status_code == 404


def test_status_transitions_stamp_on_entry(client, api_headers):
    alert = _event(client, api_headers, elderly="A", room="1", type="Fall", confidence=0.6).json()["alert"]
    path = f"/api/alerts/{alert['id']}"

    acked = client.patch(path, json={"status": "checked"}, headers=api_headers).json()["alert"]
    assert acked["status"] == "Acknowledged"
    assert acked["acknowledgedAt"] is not None

    again = client.patch(path, json={"status": "Acknowledged"}, headers=api_headers).json()["alert"]
    assert again["acknowledgedAt"] == acked["acknowledgedAt"]

    resolved = client.patch(path, json={"status": "resolved"}, headers=api_headers).json()["alert"]
    assert resolved["status"] == "Resolved"
    assert resolved["resolvedAt"] is not None
    assert resolved["acknowledgedAt"] == acked["acknowledgedAt"]

    reopened = client.patch(path, json={"status": "new"}, headers=api_headers).json()["alert"]
    assert reopened["status"] == "New"

    invalid = client.patch(path, json={"status": "closed"}, headers=api_headers)
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "Invalid status"

    assert client.patch("/api/alerts/999", json={"status": "resolved"}, headers=api_headers).status_code == 404


def test_resolve_straight_from_new_leaves_acknowledged_at_empty(client, api_headers):
    alert = _event(client, api_headers, elderly="A", room="1", type="Fall", confidence=0.6).json()["alert"]
    assert alert["acknowledgedAt"] is None

    resolved = client.patch(f"/api/alerts/{alert['id']}", json={"status": "Resolved"}, headers=api_headers).json()["alert"]

    assert resolved["status"] == "Resolved"
    assert resolved["resolvedAt"] is not None
    assert resolved["acknowledgedAt"] is None


def test_set_media(client, api_headers):
    alert = _event(client, api_headers, elderly="A", room="1", type="Fall", confidence=0.6).json()["alert"]
    path = f"/api/alerts/{alert['id']}/media"

    assert client.patch(path, json={}, headers=api_headers).json()["error"] == "mediaUrl is required"

    updated = client.patch(path, json={"mediaUrl": "https://cdn.example/a.mp4"}, headers=api_headers)
    assert updated.json()["alert"]["mediaUrl"] == "https://cdn.example/a.mp4"


def test_app_alerts_are_owner_scoped(client, api_headers):
    _, owner = signup(client, "owner@example.com")
    subscribe(client, owner)
    _, stranger = signup(client, "stranger@example.com")
    subscribe(client, stranger)

    resident = _resident(client, api_headers)
    device = register_device(client, "cam-home")
    client.patch(f"/api/residents/{resident['id']}/assign-device", json={"deviceId": device["id"]}, headers=api_headers)
    client.post("/api/app/devices/claim", json={"deviceId": "cam-home"}, headers=owner)

    via_resident = _event(client, api_headers, residentId=resident["id"], type="Fall", confidence=0.9).json()["alert"]
    via_device = _event(client, api_headers, elderly="Guest", room="Hall", type="Fall", confidence=0.8, deviceId="cam-home").json()["alert"]
    _event(client, api_headers, elderly="Elsewhere", room="9", type="Fall", confidence=0.8)

    mine = client.get("/api/app/alerts", headers=owner).json()
    assert sorted(a["id"] for a in mine["alerts"]) == sorted([via_resident["id"], via_device["id"]])
    assert client.get("/api/app/alerts", headers=stranger).json()["alerts"] == []

    latest = client.get("/api/app/alerts/latest", headers=owner).json()
    assert [a["id"] for a in latest["alerts"]] == [via_device["id"]]

    denied = client.patch(f"/api/app/alerts/{via_resident['id']}", json={"status": "acknowledge"}, headers=stranger)
    assert denied.status_code == 404
    assert denied.json()["error"] == "Alert not found"

    accepted = client.patch(f"/api/app/alerts/{via_resident['id']}", json={"status": "acknowledge"}, headers=owner)
    body = accepted.json()
    assert accepted.status_code == 200
    assert body["status"] == "Acknowledged"
    assert body["alert"]["status"] == "Acknowledged"
    assert body["alert"]["deviceId"] == "cam-home"


def test_app_alerts_require_subscription(client):
    _, headers = signup(client)
    assert client.get("/api/app/alerts", headers=headers).status_code == 403
