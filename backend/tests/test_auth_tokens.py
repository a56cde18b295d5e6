from fastapi.testclient import TestClient
from logit.main import app
from logit.security import create_access_token, decode_token
from helpers import PWD, auth_headers, unique_email

client = TestClient(app)

def register(email, pwd=PWD):
    return client.post("/auth/register", json={"email": email, "name": "T", "password": pwd})

def login(email, pwd=PWD):
    return client.post("/auth/login", json={"email": email, "password": pwd})

def test_register_duplicate_email_400():
    e = unique_email()
    assert register(e).status_code == 201
    r = register(e.upper())
    assert r.status_code == 400
    assert r.json()["detail"] == "email already registered"

def test_login_unknown_email_401():
    assert login(unique_email()).status_code == 401

def test_login_wrong_password_401():
    e = unique_email()
    register(e)
    assert login(e, "WrongPass123!").status_code == 401

def test_login_token_carries_user_and_email():
    e = unique_email()
    register(e)
    payload = decode_token(login(e).json()["access_token"])
    assert payload["email"] == e
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {login(e).json()['access_token']}"}).json()
    assert payload["sub"] == str(me["id"])

def test_token_expired():
    H = auth_headers(client)
    user_id = client.get("/auth/me", headers=H).json()["id"]
    expired = create_access_token(str(user_id), expires_minutes=-1)
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_garbage_token_401():
    r = client.get("/workouts", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

def test_token_for_missing_user_401():
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {create_access_token('999999')}"})
    assert r.status_code == 401

def test_workout_routes_require_auth():
    assert client.get("/workouts").status_code == 401
    assert client.post("/workouts", json={"exercises": []}).status_code == 401
    assert client.get("/workouts/exercise-suggestions", params={"query": "be"}).status_code == 401
    assert client.get("/dashboard").status_code == 401
