# tests/test_journal.py

from datetime import timedelta

from cortexia.services.journal_service import JournalService
from cortexia.utils import today


def _entry(client, headers, **fields):
    body = {"content": "Good day. Shipped the release.", **fields}
    resp = client.post("/api/v1/journal", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_create_defaults_to_today(client, auth_headers):
    entry = _entry(client, auth_headers, tags=["work"], gratitude=["coffee"])
    assert entry["date"] == today().isoformat()
    assert entry["tags"] == ["work"]
    assert entry["wins"] == []


def test_scores_are_bounded(client, auth_headers):
    resp = client.post("/api/v1/journal", json={"content": "x", "mood": 11}, headers=auth_headers)
    assert resp.status_code == 400


def test_get_by_date(client, auth_headers):
    day = (today() - timedelta(days=2)).isoformat()
    entry = _entry(client, auth_headers, date=day)
    assert client.get(f"/api/v1/journal/date/{day}", headers=auth_headers).json()["id"] == entry["id"]
    assert client.get(f"/api/v1/journal/date/{today().isoformat()}", headers=auth_headers).status_code == 404


def test_list_is_newest_first_and_limited(client, auth_headers):
    _entry(client, auth_headers, title="old", date=(today() - timedelta(days=1)).isoformat())
    _entry(client, auth_headers, title="new")
    titles = [e["title"] for e in client.get("/api/v1/journal", headers=auth_headers).json()]
    assert titles == ["new", "old"]
    assert len(client.get("/api/v1/journal", params={"limit": 1}, headers=auth_headers).json()) == 1


def test_update_and_delete(client, auth_headers):
    entry = _entry(client, auth_headers)
    data = client.put(f"/api/v1/journal/{entry['id']}", json={"mood": 9}, headers=auth_headers).json()["data"]
    assert data["mood"] == 9
    assert data["content"] == entry["content"]
    assert client.delete(f"/api/v1/journal/{entry['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/journal/{entry['id']}", headers=auth_headers).status_code == 404


def test_stats(client, auth_headers):
    _entry(client, auth_headers, mood=8, energy=6, tags=["work", "gym"])
    _entry(client, auth_headers, date=(today() - timedelta(days=1)).isoformat(), mood=6, tags=["work"])

    stats = client.get("/api/v1/journal/stats", headers=auth_headers).json()
    assert stats["total_entries"] == 2
    assert stats["avg_mood"] == 7.0
    # missing scores count as 5
    assert stats["avg_energy"] == 5.5
    assert stats["avg_stress"] == 5.0
    assert stats["top_tags"] == ["work", "gym"]
    assert stats["streak"] == 2


def test_streak_needs_today():
    days = {today() - timedelta(days=1), today() - timedelta(days=2)}
    assert JournalService.calculate_streak(days) == 0
    assert JournalService.calculate_streak(days | {today()}) == 3


def test_summarize_fallback_uses_first_sentence(client, auth_headers):
    entry = _entry(client, auth_headers)
    data = client.post(f"/api/v1/journal/{entry['id']}/summarize", headers=auth_headers).json()["data"]
    assert data["ai_summary"] == "Good day."


def test_summarize_with_llm(client, auth_headers, fake_router):
    fake_router.next_text = "  You had a productive day.  "
    entry = _entry(client, auth_headers)
    data = client.post(f"/api/v1/journal/{entry['id']}/summarize", headers=auth_headers).json()["data"]
    assert data["ai_summary"] == "You had a productive day."
    assert "Shipped the release." in fake_router.last_prompt


def test_summarize_missing_entry(client, auth_headers):
    assert client.post("/api/v1/journal/42/summarize", headers=auth_headers).status_code == 404
