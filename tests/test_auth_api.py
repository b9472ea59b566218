from conftest import PASSWORD, auth_headers, create_user
from visadocs.api.routes import auth_routes

REGISTRATION = {
    "username": "newstudent",
    "email": "new.student@example.com",
    "password": "longenough1",
    "first_name": "New",
    "last_name": "Student",
    "study_destination": "Australia",
    "agree_to_terms": True,
}


def test_register_returns_token_and_default_quota(client):
    response = client.post("/api/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    body = response.json()
    assert body["access_token"]
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "user"
    assert body["user"]["max_analyses"] == 3
    assert body["user"]["analysis_count"] == 0

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new.student@example.com"


def test_register_queues_welcome_email(client, monkeypatch):
    sent = []
    monkeypatch.setattr(auth_routes, "send_welcome_email", lambda *args: sent.append(args))

    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201
    assert sent == [("new.student@example.com", "New")]


def test_register_requires_terms(client):
    response = client.post("/api/auth/register", json={**REGISTRATION, "agree_to_terms": False})
    assert response.status_code == 422
    assert "error" in response.json()


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})
    assert response.status_code == 422


def test_register_duplicate_email(client):
    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201
    response = client.post("/api/auth/register", json={**REGISTRATION, "username": "other"})
    assert response.status_code == 400
    assert response.json() == {"error": "Email already registered"}


def test_login_with_username_or_email(client, user):
    for identifier in (user.username, user.email):
        response = client.post("/api/auth/login", json={"username": identifier, "password": PASSWORD})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id


def test_login_wrong_password(client, user):
    response = client.post("/api/auth/login", json={"username": user.username, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid username or password"


def test_login_inactive_account(client):
    create_user("sleepy", status="inactive")
    response = client.post("/api/auth/login", json={"username": "sleepy", "password": PASSWORD})
    assert response.status_code == 403


def test_protected_route_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "Authentication required"


def test_deactivated_user_token_is_refused(client):
    sleepy = create_user("sleepy", status="inactive")
    response = client.get("/api/auth/me", headers=auth_headers(sleepy))
    assert response.status_code == 403


def test_usage(client, user_headers):
    response = client.get("/api/auth/usage", headers=user_headers)
    assert response.status_code == 200
    assert response.json() == {"analysis_count": 0, "max_analyses": 3, "remaining": 3, "unlimited": False}


def test_admin_usage_is_unlimited(client, admin_headers):
    assert client.get("/api/auth/usage", headers=admin_headers).json()["unlimited"] is True
