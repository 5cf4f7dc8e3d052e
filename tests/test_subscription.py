from tests.helpers import register_device, signup


def test_me_without_subscription(client):
    _, headers = signup(client)
    response = client.get("/api/subscription/me", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "subscription": None}


def test_select_free_is_active_immediately(client):
    _, headers = signup(client)
    response = client.post("/api/subscription/select", json={"plan": "FREE"}, headers=headers)

    body = response.json()
    assert response.status_code == 200
    assert body["subscription"]["plan"] == "FREE"
    assert body["subscription"]["status"] == "ACTIVE"
    assert body["deviceLimit"] == 2


def test_select_pro_waits_for_payment(client):
    _, headers = signup(client)
    response = client.post("/api/subscription/select", json={"plan": "PRO"}, headers=headers)

    body = response.json()
    assert body["subscription"]["status"] == "PENDING_PAYMENT"
    assert body["deviceLimit"] == 4

    confirmed = client.post("/api/subscription/confirm-payment", headers=headers).json()
    assert confirmed["subscription"]["plan"] == "PRO"
    assert confirmed["subscription"]["status"] == "ACTIVE"


def test_select_is_an_upsert(client):
    _, headers = signup(client)
    first = client.post("/api/subscription/select", json={"plan": "PRO"}, headers=headers).json()
    second = client.post("/api/subscription/select", json={"plan": "FREE"}, headers=headers).json()

    assert first["subscription"]["id"] == second["subscription"]["id"]
    assert second["subscription"]["status"] == "ACTIVE"


def test_select_rejects_unknown_plan(client):
    _, headers = signup(client)
    response = client.post("/api/subscription/select", json={"plan": "GOLD"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "plan must be FREE or PRO"


def test_confirm_payment_without_selection(client):
    _, headers = signup(client)
    response = client.post("/api/subscription/confirm-payment", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No subscription selected yet"


def test_app_surface_requires_a_plan(client):
    _, headers = signup(client)
    response = client.get("/api/app/devices", headers=headers)

    assert response.status_code == 403
    assert response.json()["code"] == "SUBSCRIPTION_REQUIRED"


def test_app_surface_requires_paid_pro(client):
    _, headers = signup(client)
    client.post("/api/subscription/select", json={"plan": "PRO"}, headers=headers)

    response = client.get("/api/app/devices", headers=headers)
    assert response.status_code == 403
    assert response.json()["code"] == "SUBSCRIPTION_NOT_ACTIVE"
    assert response.json()["status"] == "PENDING_PAYMENT"


def test_downgrade_keeps_existing_claims_but_blocks_new_ones(client):
    _, headers = signup(client)
    client.post("/api/subscription/select", json={"plan": "PRO"}, headers=headers)
    client.post("/api/subscription/confirm-payment", headers=headers)
    for n in range(3):
        register_device(client, f"cam-{n}")
        assert client.post("/api/app/devices/claim", json={"deviceId": f"cam-{n}"}, headers=headers).status_code == 200

    client.post("/api/subscription/select", json={"plan": "FREE"}, headers=headers)
    register_device(client, "cam-3")

    listing = client.get("/api/app/devices", headers=headers).json()
    assert listing["count"] == 3
    assert listing["deviceLimit"] == 2

    response = client.post("/api/app/devices/claim", json={"deviceId": "cam-3"}, headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Device limit reached"
