from app.api.deps import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE


def _register(client, username="alice", email="alice@x.com", password="P@ss1"):
    return client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "full_name": "Alice", "password": password},
    )


def test_register_returns_sanitized_user(client):
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    assert body["data"]["username"] == "alice"
    assert "password" not in body["data"]
    assert "password_hash" not in body["data"]
    assert "refresh_token" not in body["data"]


def test_register_duplicate_renders_error_envelope(client):
    _register(client)
    response = _register(client, email="other@x.com")

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == 409
    assert "already exists" in body["message"]


def test_register_validation_errors_are_field_level(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "not-an-email", "full_name": " ", "password": "P@ss1"},
    )

    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"body.email", "body.full_name"}


def test_login_sets_cookies_and_returns_tokens(client):
    _register(client)
    response = client.post("/api/v1/auth/login", json={"username": "alice", "password": "P@ss1"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["access_token"] and data["refresh_token"]
    assert data["user"]["email"] == "alice@x.com"
    assert "refresh_token" not in data["user"]
    assert response.cookies.get(ACCESS_TOKEN_COOKIE) == data["access_token"]
    assert response.cookies.get(REFRESH_TOKEN_COOKIE) == data["refresh_token"]
    set_cookie = response.headers.get_list("set-cookie")
    assert all("httponly" in header.lower() for header in set_cookie)


def test_login_missing_credentials(client):
    response = client.post("/api/v1/auth/login", json={"password": "P@ss1"})
    assert response.status_code == 400
    assert response.json()["statusCode"] == 400


def test_login_unknown_user_and_wrong_password(client):
    _register(client)

    response = client.post("/api/v1/auth/login", json={"username": "bob", "password": "P@ss1"})
    assert response.status_code == 404

    response = client.post("/api/v1/auth/login", json={"email": "alice@x.com", "password": "nope"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_refresh_from_cookie_rotates_tokens(client):
    _register(client)
    login = client.post("/api/v1/auth/login", json={"username": "alice", "password": "P@ss1"})
    old_refresh = login.json()["data"]["refresh_token"]

    response = client.post("/api/v1/auth/refresh")

    assert response.status_code == 200
    new_refresh = response.json()["data"]["refresh_token"]
    assert new_refresh != old_refresh
    assert client.cookies.get(REFRESH_TOKEN_COOKIE) == new_refresh


def test_refresh_from_body_twice(client):
    _register(client)
    login = client.post("/api/v1/auth/login", json={"username": "alice", "password": "P@ss1"})
    original = login.json()["data"]["refresh_token"]
    client.cookies.clear()

    first = client.post("/api/v1/auth/refresh", json={"refresh_token": original})
    client.cookies.clear()
    second = client.post("/api/v1/auth/refresh", json={"refresh_token": original})

    assert first.status_code == 200
    assert second.status_code == 401
    assert "log in again" in second.json()["message"]


def test_refresh_accepts_camel_case_body_field(client):
    _register(client)
    login = client.post("/api/v1/auth/login", json={"username": "alice", "password": "P@ss1"})
    original = login.json()["data"]["refresh_token"]
    client.cookies.clear()

    response = client.post("/api/v1/auth/refresh", json={"refreshToken": original})

    assert response.status_code == 200
    assert response.json()["data"]["refresh_token"] != original


def test_refresh_without_token(client):
    response = client.post("/api/v1/auth/refresh")
    assert response.status_code == 401
    assert response.json()["message"] == "Refresh token is required"


def test_refresh_with_invalid_token(client):
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
    assert response.status_code == 401


def test_logout_clears_cookies_and_revokes_refresh(client):
    _register(client)
    login = client.post("/api/v1/auth/login", json={"username": "alice", "password": "P@ss1"})
    refresh = login.json()["data"]["refresh_token"]

    response = client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert client.cookies.get(ACCESS_TOKEN_COOKIE) is None
    assert client.cookies.get(REFRESH_TOKEN_COOKIE) is None

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert response.status_code == 401


def test_logout_requires_authentication(client):
    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 401
