# tests/test_auth.py

from cortexia.auth import hash_password, verify_password, create_token, verify_token


def test_password_hash_round_trip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_user_id():
    payload = verify_token(create_token({"user_id": 7, "username": "x"}))
    assert payload["user_id"] == 7
    assert "jti" in payload and "exp" in payload


def test_verify_token_rejects_garbage():
    assert verify_token("not-a-token") is None


def test_register_login_me(client):
    resp = client.post("/api/v1/auth/register", json={"username": "carol", "password": "secret123"})
    assert resp.status_code == 201

    resp = client.post("/api/v1/auth/login", json={"username": "carol", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["data"]["token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "carol"
    assert "hashed_password" not in me.json()


def test_duplicate_username_is_rejected(client, auth_headers):
    resp = client.post("/api/v1/auth/register", json={"username": "alice", "password": "another1"})
    assert resp.status_code == 400


def test_bad_credentials(client, auth_headers):
    resp = client.post("/api/v1/auth/login", json={"username": "alice", "password": "nope-nope"})
    assert resp.status_code == 401


def test_routes_require_token(client):
    assert client.get("/api/v1/tasks").status_code == 401
    assert client.get("/api/v1/tasks", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_users_cannot_see_each_others_records(client, auth_headers, other_headers):
    task_id = client.post("/api/v1/tasks", json={"title": "private"}, headers=auth_headers).json()["data"]["id"]

    assert client.get("/api/v1/tasks", headers=other_headers).json() == []
    assert client.get(f"/api/v1/tasks/{task_id}", headers=other_headers).status_code == 404
    assert client.put(f"/api/v1/tasks/{task_id}", json={"title": "x"}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/v1/tasks/{task_id}", headers=other_headers).status_code == 404
    assert client.get(f"/api/v1/tasks/{task_id}", headers=auth_headers).status_code == 200
