from conftest import register


def test_register_returns_token_and_public_user(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "  Asha Rao ", "email": "Asha@Example.edu", "password": "pw-123456", "role": "teacher"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["name"] == "Asha Rao"
    assert body["user"]["email"] == "asha@example.edu"
    assert body["user"]["role"] == "teacher"
    assert "passwordHash" not in body["user"]
    assert "password_hash" not in body["user"]


def test_register_rejects_duplicate_email_case_insensitively(client):
    register(client, "Asha Rao", "teacher", email="asha@example.edu")

    response = client.post(
        "/api/auth/register",
        json={"name": "Someone", "email": "ASHA@example.edu", "password": "x", "role": "student"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


def test_register_rejects_unknown_role(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Root", "email": "root@example.edu", "password": "x", "role": "admin"},
    )

    assert response.status_code == 400
    assert "role" in response.json()["message"]


def test_register_rejects_blank_name(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "   ", "email": "blank@example.edu", "password": "x", "role": "student"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Name, email, and password are required"


def test_login_and_me(client):
    register(client, "Kabir Das", "TA", email="kabir@example.edu", password="s3cret")

    login = client.post("/api/auth/login", json={"email": "kabir@example.edu", "password": "s3cret"})
    assert login.status_code == 200
    token = login.json()["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["name"] == "Kabir Das"
    assert me.json()["user"]["role"] == "TA"


def test_login_with_wrong_password(client):
    register(client, "Kabir Das", "TA", email="kabir@example.edu", password="s3cret")

    response = client.post("/api/auth/login", json={"email": "kabir@example.edu", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid email or password"}


def test_protected_routes_require_a_token(client):
    response = client.get("/api/classes")
    assert response.status_code in (401, 403)
    assert "message" in response.json()

    response = client.get("/api/classes", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid authentication credentials"}


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
