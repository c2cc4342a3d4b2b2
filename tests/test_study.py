# tests/test_study.py


def _session(client, headers, **fields):
    body = {"subject": "Math", "duration": 50, **fields}
    resp = client.post("/api/v1/study/sessions", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_create_and_update(client, auth_headers):
    s = _session(client, auth_headers, topic="Linear algebra", pomodoros=2)
    assert s["difficulty"] == "medium"
    assert s["focus_quality"] is None

    data = client.put(
        f"/api/v1/study/sessions/{s['id']}", json={"focus_quality": 5}, headers=auth_headers
    ).json()["data"]
    assert data["focus_quality"] == 5
    assert data["topic"] == "Linear algebra"


def test_focus_quality_range(client, auth_headers):
    resp = client.post(
        "/api/v1/study/sessions", json={"subject": "x", "duration": 10, "focus_quality": 6}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_stats_default_focus(client, auth_headers):
    _session(client, auth_headers, pomodoros=2, focus_quality=5)
    _session(client, auth_headers, subject="Physics", duration=70, pomodoros=3)

    stats = client.get("/api/v1/study/stats", headers=auth_headers).json()
    assert stats["total_minutes"] == 120
    assert stats["total_hours"] == 2.0
    assert stats["total_pomodoros"] == 5
    assert stats["avg_focus_quality"] == 4.0
    assert stats["session_count"] == 2
    assert stats["by_subject"] == {
        "Math": {"minutes": 50, "sessions": 1},
        "Physics": {"minutes": 70, "sessions": 1},
    }


def test_empty_stats(client, auth_headers):
    stats = client.get("/api/v1/study/stats", headers=auth_headers).json()
    assert stats["session_count"] == 0
    assert stats["avg_focus_quality"] == 0


def test_soft_delete(client, auth_headers):
    s = _session(client, auth_headers)
    assert client.delete(f"/api/v1/study/sessions/{s['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/study/sessions/{s['id']}", headers=auth_headers).status_code == 404
    assert client.get("/api/v1/study/sessions", headers=auth_headers).json() == []
    assert client.get("/api/v1/study/stats", headers=auth_headers).json()["session_count"] == 0


def test_subject_filter(client, auth_headers):
    _session(client, auth_headers)
    _session(client, auth_headers, subject="Art")
    data = client.get("/api/v1/study/sessions", params={"subject": "Art"}, headers=auth_headers).json()
    assert [s["subject"] for s in data] == ["Art"]
