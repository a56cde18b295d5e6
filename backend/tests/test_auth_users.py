from fastapi.testclient import TestClient
from logit.main import app
from helpers import PWD, auth_headers, unique_email

client = TestClient(app)

def test_register_weak_password_rejected():
    r = client.post("/auth/register", json={"email": unique_email(), "name": "Weak", "password": "short"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body."}

def test_register_password_needs_digit():
    r = client.post("/auth/register", json={"email": unique_email(), "name": "Weak", "password": "onlyletters"})
    assert r.status_code == 400

def test_register_login_and_me():
    email = unique_email()
    r = client.post("/auth/register", json={"email": email, "name": "Ok", "password": PWD})
    assert r.status_code == 201
    r = client.post("/auth/login", json={"email": email, "password": PWD})
    assert r.status_code == 200
    token = r.json()["access_token"]
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    body = r.json()
    assert body["email"] == email
    assert "password_hash" not in body

def test_update_profile_names():
    H = auth_headers(client)
    r = client.patch("/auth/me", headers=H, json={"first_name": "  Sam ", "last_name": ""})
    assert r.status_code == 200
    body = r.json()
    assert body["first_name"] == "Sam"
    assert body["last_name"] is None

def test_update_profile_name_too_long():
    H = auth_headers(client)
    r = client.patch("/auth/me", headers=H, json={"first_name": "x" * 41})
    assert r.status_code == 400

def test_profile_requires_auth():
    assert client.patch("/auth/me", json={"first_name": "A"}).status_code == 401
