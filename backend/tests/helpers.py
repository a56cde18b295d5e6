from fastapi.testclient import TestClient
import uuid

PWD = "StrongPassw0rd!"

def unique_email():
    return f"u_{uuid.uuid4().hex[:10]}@example.com"

def auth_headers(client: TestClient, email=None, pwd=PWD):
    email = email or unique_email()
    client.post("/auth/register", json={"email": email, "name": "Lifter", "password": pwd})
    r = client.post("/auth/login", json={"email": email, "password": pwd})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
