from tests.helpers import signup


def test_list_household_admins_newest_first(client):
    _, headers = signup(client, "first@example.com")
    signup(client, "second@example.com")

    response = client.get("/api/household-admins", headers=headers)
    users = response.json()["users"]

    assert response.status_code == 200
    assert [u["email"] for u in users] == ["second@example.com", "first@example.com"]
    assert users[0]["isDisabled"] is False
    assert "passwordHash" not in users[0]


def test_toggle_status(client):
    _, headers = signup(client, "boss@example.com")
    target, _ = signup(client, "staff@example.com")
    path = f"/api/household-admins/{target['id']}/status"

    disabled = client.patch(path, json={"isDisabled": True}, headers=headers)
    assert disabled.json()["user"]["isDisabled"] is True

    enabled = client.patch(path, json={"isDisabled": False}, headers=headers)
    assert enabled.json()["user"]["isDisabled"] is False


def test_status_validation(client):
    me, headers = signup(client, "boss@example.com")

    assert client.patch("/api/household-admins/1/status", json={}, headers=headers).status_code == 400
    assert client.patch("/api/household-admins/1/status", json={"isDisabled": "yes"}, headers=headers).status_code == 400

    self_disable = client.patch(f"/api/household-admins/{me['id']}/status", json={"isDisabled": True}, headers=headers)
    assert self_disable.status_code == 400
    assert self_disable.json()["error"] == "You cannot disable yourself"

    missing = client.patch("/api/household-admins/999/status", json={"isDisabled": True}, headers=headers)
    assert missing.status_code == 404
