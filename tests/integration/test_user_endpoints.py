"""Profile, stats and service-level endpoints."""


def test_get_profile(client, make_user, auth_headers):
    user = make_user(full_name="Sam Lee")
    response = client.get(f"/api/v1/users/{user.id}", headers=auth_headers(user))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fullName"] == "Sam Lee"
    assert data["preferredMode"] == "personal"
    assert data["contextTraining"] == []


def test_style_examples_and_stats(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    client.post(
        f"/api/v1/users/{user.id}/modes",
        json={"name": "personal", "description": "Close relationships", "isDefault": True},
        headers=headers,
    )

    added = client.post(f"/api/v1/users/{user.id}/style-examples", json={"example": "cheers mate"}, headers=headers)
    assert added.status_code == 200
    assert added.json()["message"] == "Training context added successfully"
    assert added.json()["data"]["contextTraining"] == ["cheers mate"]

    client.post("/api/v1/translations", json={"translationInput": "you never call"}, headers=headers)
    stats = client.get(f"/api/v1/users/{user.id}/stats", headers=headers).json()["data"]
    assert stats["totalTranslations"] == 1
    assert stats["translationsByMode"] == {"personal": 1}
    assert "joinedDate" in stats


def test_blank_style_example_is_rejected(client, make_user, auth_headers):
    user = make_user()
    response = client.post(f"/api/v1/users/{user.id}/style-examples", json={"example": "  "}, headers=auth_headers(user))
    assert response.status_code == 400


def test_malformed_token_is_unauthorized(client, make_user):
    user = make_user()
    response = client.get(f"/api/v1/users/{user.id}", headers={"Authorization": "Token abc"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid authorization header format"

    expired = client.get(f"/api/v1/users/{user.id}", headers={"Authorization": "Bearer abc"})
    assert expired.json()["message"] == "Invalid or expired token"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Service is healthy"
    assert body["data"]["database"]["status"] == "healthy"
    assert client.get("/api/v1/health").status_code == 200


def test_unknown_route_envelope(client):
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
    body = response.json()
    assert body == {"success": False, "message": "Route /api/v1/nope not found", "statusCode": 404}


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.json()["success"] is True
