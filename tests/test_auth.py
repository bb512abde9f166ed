import uuid

from conftest import signup


def test_root_is_running(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_signup_returns_token_and_user(client):
    email = f"new-{uuid.uuid4().hex[:8]}@example.com"
    data = signup(client, email=email)
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == email


def test_duplicate_signup_conflicts(client):
    email = f"dup-{uuid.uuid4().hex[:8]}@example.com"
    signup(client, email=email)
    resp = client.post("/auth/signup", json={"email": email, "password": "secret123"})
    assert resp.status_code == 409


def test_login_and_me(client):
    email = f"login-{uuid.uuid4().hex[:8]}@example.com"
    signup(client, email=email, password="hunter22")

    resp = client.post("/auth/login", json={"email": email.upper(), "password": "hunter22"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == email


def test_login_wrong_password(client):
    email = f"bad-{uuid.uuid4().hex[:8]}@example.com"
    signup(client, email=email)
    resp = client.post("/auth/login", json={"email": email, "password": "nope-nope"})
    assert resp.status_code == 401


def test_short_password_is_validation_error(client):
    resp = client.post("/auth/signup", json={"email": "short@example.com", "password": "123"})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Validation failed.")


def test_worklogs_require_auth(client):
    assert client.get("/worklogs/date/2024-05-01").status_code == 401
    resp = client.get("/worklogs/date/2024-05-01", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_token_form_login(client):
    email = f"form-{uuid.uuid4().hex[:8]}@example.com"
    signup(client, email=email, password="formpass1")
    resp = client.post("/auth/token", data={"username": email, "password": "formpass1"})
    assert resp.status_code == 200
    assert resp.json()["access_token"]
