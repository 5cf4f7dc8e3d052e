from tests.helpers import register_device


def _create(client, api_headers, name="Grandma Lee", room="101"):
    response = client.post("/api/residents", json={"name": name, "room": room}, headers=api_headers)
    assert response.status_code == 200, response.text
    return response.json()["created"]


def test_residents_require_api_key(client):
    assert client.get("/api/residents").status_code == 401


def test_create_and_list_residents(client, api_headers):
    _create(client, api_headers, "B", "2")
    _create(client, api_headers, "A", "1")

    listed = client.get("/api/residents", headers=api_headers).json()
    assert [r["name"] for r in listed] == ["B", "A"]
    assert listed[0]["device"] is None


def test_create_validation_and_duplicates(client, api_headers):
    missing = client.post("/api/residents", json={"name": "Solo"}, headers=api_headers)
    assert missing.status_code == 400
    assert missing.json()["error"] == "name and room are required"

    _create(client, api_headers, "Twin")
    duplicate = client.post("/api/residents", json={"name": "Twin", "room": "9"}, headers=api_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "Resident name already exists"


def test_update_resident(client, api_headers):
    first = _create(client, api_headers, "First")
    _create(client, api_headers, "Second")

    empty = client.patch(f"/api/residents/{first['id']}", json={}, headers=api_headers)
    assert empty.status_code == 400
    assert empty.json()["error"] == "Provide name or room"

    assert client.patch("/api/residents/999", json={"room": "1"}, headers=api_headers).status_code == 404

    clash = client.patch(f"/api/residents/{first['id']}", json={"name": "Second"}, headers=api_headers)
    assert clash.status_code == 409

    updated = client.patch(f"/api/residents/{first['id']}", json={"room": "303"}, headers=api_headers)
    assert updated.json()["updated"]["room"] == "303"
    assert updated.json()["updated"]["name"] == "First"


def test_assign_and_unassign_device(client, api_headers):
    resident = _create(client, api_headers)
    device = register_device(client, "cam-1")

    assigned = client.patch(
        f"/api/residents/{resident['id']}/assign-device",
        json={"deviceId": device["id"]},
        headers=api_headers,
    )
    assert assigned.status_code == 200
    assert assigned.json()["updated"]["device"]["deviceId"] == "cam-1"

    again = client.patch(
        f"/api/residents/{resident['id']}/assign-device",
        json={"deviceId": device["id"]},
        headers=api_headers,
    )
    assert again.status_code == 200

    unassigned = client.patch(f"/api/residents/{resident['id']}/unassign-device", headers=api_headers)
    assert unassigned.json()["updated"]["deviceId"] is None
    assert unassigned.json()["updated"]["device"] is None


def test_assign_device_errors(client, api_headers):
    first = _create(client, api_headers, "First")
    second = _create(client, api_headers, "Second")
    device = register_device(client, "cam-2")

    path = f"/api/residents/{second['id']}/assign-device"
    assert client.patch(path, json={}, headers=api_headers).json()["error"] == "deviceId (number) is required"
    assert client.patch("/api/residents/999/assign-device", json={"deviceId": device["id"]}, headers=api_headers).status_code == 404
    assert client.patch(path, json={"deviceId": 999}, headers=api_headers).json()["error"] == "Device not found"

    client.patch(f"/api/residents/{first['id']}/assign-device", json={"deviceId": device["id"]}, headers=api_headers)
    taken = client.patch(path, json={"deviceId": device["id"]}, headers=api_headers)
    assert taken.status_code == 409
    assert taken.json() == {
        "ok": False,
        "error": "Device already assigned to another resident",
        "assignedResidentId": first["id"],
    }

    spare = register_device(client, "cam-3")
    client.delete(f"/api/devices/{spare['id']}", headers=api_headers)
    disabled = client.patch(path, json={"deviceId": spare["id"]}, headers=api_headers)
    assert disabled.status_code == 409
    assert disabled.json()["error"] == "Device is disabled"


def test_delete_blocked_by_active_alerts_then_keeps_snapshots(client, api_headers):
    resident = _create(client, api_headers, "Grandpa Joe", "7")
    alert = client.post(
        "/api/events",
        json={"residentId": resident["id"], "type": "Fall detected", "confidence": 0.9},
        headers=api_headers,
    ).json()["alert"]

    blocked = client.delete(f"/api/residents/{resident['id']}", headers=api_headers)
    assert blocked.status_code == 409
    assert blocked.json() == {"ok": False, "error": "Cannot delete resident with active alerts", "activeAlerts": 1}

    client.patch(f"/api/alerts/{alert['id']}", json={"status": "Resolved"}, headers=api_headers)
    deleted = client.delete(f"/api/residents/{resident['id']}", headers=api_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True}

    detail = client.get(f"/api/alerts/{alert['id']}", headers=api_headers).json()
    assert detail["residentId"] is None
    assert detail["residentExists"] is False
    assert detail["displayName"] == "Grandpa Joe"
    assert detail["residentDisplayName"] == "Resident deleted"
    assert detail["room"] == "7"


def test_delete_missing_resident(client, api_headers):
    assert client.delete("/api/residents/42", headers=api_headers).status_code == 404
