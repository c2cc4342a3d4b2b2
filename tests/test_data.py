# tests/test_data.py

from datetime import timedelta

from cortexia.routes import data_routes
from cortexia.services import data_service
from cortexia.utils import today


def _seed(client, headers):
    client.post("/api/v1/tasks", json={"title": "Write", "tags": ["a"]}, headers=headers)
    habit = client.post("/api/v1/habits", json={"name": "Read"}, headers=headers).json()["data"]
    client.post(f"/api/v1/habits/{habit['id']}/check", headers=headers)
    client.post(
        f"/api/v1/habits/{habit['id']}/check",
        json={"date": (today() - timedelta(days=1)).isoformat()},
        headers=headers,
    )
    client.post("/api/v1/goals", json={"title": "Learn", "milestones": [{"title": "m"}]}, headers=headers)
    client.post("/api/v1/finance/transactions", json={"type": "income", "amount": 100}, headers=headers)
    client.post("/api/v1/finance/budgets", json={"category": "food", "limit": 50}, headers=headers)
    client.post("/api/v1/time/entries", json={"task": "x", "duration": 15}, headers=headers)
    client.post("/api/v1/study/sessions", json={"subject": "Go", "duration": 25}, headers=headers)
    client.post("/api/v1/journal", json={"content": "ok", "tags": ["t"]}, headers=headers)
    client.put("/api/v1/settings", json={"theme": "dark"}, headers=headers)


def test_export_shape(client, auth_headers):
    _seed(client, auth_headers)
    doc = client.get("/api/v1/data/export", headers=auth_headers).json()

    assert doc["version"] == 1
    for key in ("tasks", "goals", "transactions", "budgets", "time_entries", "study_sessions", "journal_entries"):
        assert len(doc[key]) == 1, key
    assert len(doc["habits"]) == 1
    assert len(doc["habits"][0]["completions"]) == 2
    assert doc["settings"]["theme"] == "dark"
    assert doc["tasks"][0]["tags"] == ["a"]


def test_export_skips_soft_deleted(client, auth_headers):
    entry = client.post("/api/v1/time/entries", json={"task": "x", "duration": 15}, headers=auth_headers).json()
    client.delete(f"/api/v1/time/entries/{entry['data']['id']}", headers=auth_headers)
    assert client.get("/api/v1/data/export", headers=auth_headers).json()["time_entries"] == []


def test_import_into_another_account(client, auth_headers, other_headers):
    _seed(client, auth_headers)
    doc = client.get("/api/v1/data/export", headers=auth_headers).json()

    resp = client.post("/api/v1/data/import", json=doc, headers=other_headers)
    assert resp.status_code == 200, resp.text
    counts = resp.json()["imported"]
    assert counts["tasks"] == 1
    assert counts["habits"] == 1
    assert counts["habit_completions"] == 2

    copied = client.get("/api/v1/data/export", headers=other_headers).json()
    assert copied["tasks"][0]["title"] == "Write"
    assert copied["tasks"][0]["user_id"] != doc["tasks"][0]["user_id"]
    assert copied["habits"][0]["streak"] == doc["habits"][0]["streak"]
    assert copied["settings"]["theme"] == "dark"
    assert client.get("/api/v1/habits/today", headers=other_headers).json()[0]["completed_today"] is True


def test_import_replaces_existing_records(client, auth_headers):
    client.post("/api/v1/tasks", json={"title": "old"}, headers=auth_headers)
    client.post("/api/v1/data/import", json={"tasks": [{"title": "new", "status": "todo"}]}, headers=auth_headers)
    titles = [t["title"] for t in client.get("/api/v1/tasks", headers=auth_headers).json()]
    assert titles == ["new"]


def test_import_rejects_bad_dates(client, auth_headers):
    resp = client.post(
        "/api/v1/data/import",
        json={"journal_entries": [{"content": "x", "date": "not-a-date"}]},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_delete_all_keeps_account(client, auth_headers, other_headers):
    _seed(client, auth_headers)
    client.post("/api/v1/tasks", json={"title": "bob's"}, headers=other_headers)

    counts = client.delete("/api/v1/data", headers=auth_headers).json()["deleted"]
    assert counts["tasks"] == 1
    assert counts["habit_completions"] == 2

    doc = client.get("/api/v1/data/export", headers=auth_headers).json()
    assert all(doc[key] == [] for key in ("tasks", "goals", "habits", "journal_entries"))
    assert doc["settings"]["theme"] == "system"
    assert client.get("/api/v1/auth/me", headers=auth_headers).status_code == 200
    assert len(client.get("/api/v1/tasks", headers=other_headers).json()) == 1


def test_sync_requires_supabase(client, auth_headers):
    assert client.post("/api/v1/data/sync", headers=auth_headers).status_code == 503


class _FakeTable:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def upsert(self, rows, **kwargs):
        self.log.append((self.name, rows, kwargs))
        return self

    def execute(self):
        return None


class _FakeSupabase:
    def __init__(self):
        self.log = []

    def table(self, name):
        return _FakeTable(name, self.log)


def test_sync_upserts_every_table(client, auth_headers, user_id, monkeypatch):
    fake = _FakeSupabase()
    monkeypatch.setattr(data_routes, "is_supabase_configured", lambda: True)
    monkeypatch.setattr(data_service, "get_supabase_admin", lambda: fake)
    _seed(client, auth_headers)

    synced = client.post("/api/v1/data/sync", headers=auth_headers).json()["synced"]
    assert synced["habit_completions"] == 2
    assert synced["tasks"] == 1

    tables = {name for name, _, _ in fake.log}
    assert {"tasks", "habits", "habit_completions", "user_settings"} <= tables
    settings_call = next(c for c in fake.log if c[0] == "user_settings")
    assert settings_call[1]["user_id"] == user_id
    assert settings_call[2] == {"on_conflict": "user_id"}


def test_import_rejects_malformed_settings(client, auth_headers):
    resp = client.post("/api/v1/data/import", json={"settings": {"preferences": "x"}}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.post("/api/v1/data/import", json={"settings": "dark"}, headers=auth_headers)
    assert resp.status_code == 400
    assert client.get("/api/v1/settings", headers=auth_headers).json()["preferences"]["start_of_week"] == "monday"
