"""Shared HTTP helpers for route tests."""

API_KEY = "test-api-key"
VALID_PUSH_TOKEN = "f" * 40 + ":APA91b" + "x" * 80


def signup(client, email="owner@example.com", password="secret123"):
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def subscribe(client, headers, plan="FREE"):
    response = client.post("/api/subscription/select", json={"plan": plan}, headers=headers)
    assert response.status_code == 200, response.text
    if plan == "PRO":
        client.post("/api/subscription/confirm-payment", headers=headers)
    return response.json()


def register_device(client, device_id, name=None, room=None):
    payload = {"deviceId": device_id}
    if name:
        payload["name"] = name
    if room:
        payload["room"] = room
    response = client.post("/api/devices/heartbeat", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["device"]
