def test_upload_requires_api_key(client):
    assert client.post("/api/upload", files={"file": ("clip.mp4", b"data", "video/mp4")}).status_code == 401


def test_upload_without_file(client, api_headers):
    response = client.post("/api/upload", headers=api_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"


def test_upload_stores_video(client, api_headers, media_service):
    response = client.post(
        "/api/upload",
        files={"file": ("clip.mp4", b"\x00\x01video", "video/mp4")},
        headers=api_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["mediaId"] == "tests/falls/clip.mp4"
    assert body["mediaUrl"].startswith("https://")
    assert media_service.uploads == [(b"\x00\x01video", "clip.mp4")]


def test_upload_rejects_oversized_file(client, api_headers, media_service):
    payload = b"x" * (media_service.max_bytes + 1)
    response = client.post("/api/upload", files={"file": ("big.mp4", payload, "video/mp4")}, headers=api_headers)

    assert response.status_code == 400
    assert media_service.uploads == []


def test_upload_provider_failure_is_500(client, api_headers, media_service):
    media_service.fail = True

    response = client.post(
        "/api/upload",
        files={"file": ("clip.mp4", b"data", "video/mp4")},
        headers=api_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"ok": False, "error": "Upload failed"}
