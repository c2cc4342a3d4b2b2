# tests/test_quick_add.py

import pytest

from cortexia.services.quick_add_service import QuickAddService
from cortexia.utils import today


@pytest.mark.parametrize("text, kind", [
    ("Spent $12.50 on lunch", "expense"),
    ("Worked on the report for 2 hours", "time"),
    ("studied ML for 90 min", "time"),
    ("Learning Spanish", "study"),
    ("Meditated this morning", "habit"),
    ("Feeling happy about the week", "journal"),
    ("I want to run a marathon", "goal"),
    ("Call the dentist", "task"),
])
def test_rule_order(text, kind):
    assert QuickAddService.parse(text)["type"] == kind


def test_expense_fields():
    parsed = QuickAddService.parse("Spent $12.50 on lunch")
    assert parsed["confidence"] == 0.9
    assert parsed["data"] == {
        "amount": 12.5, "category": "food", "description": "Spent $12.50 on lunch", "type": "expense",
    }
    assert QuickAddService.parse("paid uber 18")["data"]["category"] == "transport"
    assert QuickAddService.parse("bought a game")["data"]["amount"] == 0.0


def test_time_fields():
    data = QuickAddService.parse("Worked on the report for 2 hours")["data"]
    assert data == {"task": "Worked on the report", "duration": 120, "category": "work"}
    assert QuickAddService.parse("worked on study notes")["data"]["duration"] == 30
    assert QuickAddService.parse("worked on study notes")["data"]["category"] == "study"


def test_study_fields():
    data = QuickAddService.parse("Practicing guitar")["data"]
    assert data == {"subject": "Practicing guitar", "duration": 30}


def test_journal_mood():
    assert QuickAddService.parse("Feeling happy")["data"]["mood_score"] == 8
    sad = QuickAddService.parse("feeling sad")["data"]
    assert sad["mood"] == "difficult"
    assert sad["mood_score"] == 4
    assert QuickAddService.parse("stressed out")["data"]["mood_score"] == 6
    assert QuickAddService.parse("grateful for friends")["data"]["mood"] == "neutral"


def test_task_fallback():
    parsed = QuickAddService.parse("Fix the work laptop asap")
    assert parsed["confidence"] == 0.6
    assert parsed["data"]["domain"] == "work"
    assert parsed["data"]["priority"] == "high"
    assert QuickAddService.parse("Book a gym session")["data"]["domain"] == "health"


def test_parse_endpoint(client, auth_headers):
    resp = client.post("/api/v1/quick-add/parse", json={"text": "I want to learn piano"}, headers=auth_headers)
    assert resp.json()["type"] == "goal"
    resp = client.post("/api/v1/ai/parse", json={"input": "Spent $5 on coffee"}, headers=auth_headers)
    assert resp.json()["data"]["amount"] == 5.0


def _add(client, headers, text):
    resp = client.post("/api/v1/quick-add", json={"text": text}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_commit_expense(client, auth_headers):
    result = _add(client, auth_headers, "Spent $20 on dinner")
    assert result["record"]["amount"] == 20.0
    txs = client.get("/api/v1/finance/transactions", headers=auth_headers).json()
    assert [(t["type"], t["category"]) for t in txs] == [("expense", "food")]


def test_commit_time_and_study(client, auth_headers):
    _add(client, auth_headers, "Worked on slides for 45 min")
    entries = client.get("/api/v1/time/entries", headers=auth_headers).json()
    assert entries[0]["duration"] == 45
    assert entries[0]["task"] == "Worked on slides"

    result = _add(client, auth_headers, "Learning Rust")
    assert result["record"]["pomodoros"] == 2
    assert result["record"]["start_time"] is not None
    assert len(client.get("/api/v1/study/sessions", headers=auth_headers).json()) == 1


def test_commit_habit_reuses_existing(client, auth_headers):
    client.post("/api/v1/habits", json={"name": "Meditated"}, headers=auth_headers)
    result = _add(client, auth_headers, "meditated")
    assert result["record"]["streak"] == 1
    assert len(client.get("/api/v1/habits", headers=auth_headers).json()) == 1


def test_commit_habit_creates_when_missing(client, auth_headers):
    result = _add(client, auth_headers, "Went to gym")
    assert result["record"]["habit"]["name"] == "Went to gym"
    assert result["record"]["completion"]["completed"] is True


def test_commit_journal_goal_task(client, auth_headers):
    journal = _add(client, auth_headers, "Feeling happy today")["record"]
    assert journal["mood"] == 8
    assert journal["title"] == "Quick Entry"
    assert journal["date"] == today().isoformat()

    goal = _add(client, auth_headers, "Aim to read 20 books")["record"]
    assert goal["status"] == "active"
    assert goal["target_date"] is not None

    task = _add(client, auth_headers, "Call the bank")["record"]
    assert task["status"] == "todo"
    assert task["domain"] == "personal"


def test_empty_text_rejected(client, auth_headers):
    assert client.post("/api/v1/quick-add", json={"text": ""}, headers=auth_headers).status_code == 400


@pytest.mark.parametrize("text", ["Spent on lunch", "Spent $0 on coffee", "Worked on slides for 0 min"])
def test_commit_rejects_zero_amounts(client, auth_headers, text):
    resp = client.post("/api/v1/quick-add", json={"text": text}, headers=auth_headers)
    assert resp.status_code == 400
    assert client.get("/api/v1/finance/transactions", headers=auth_headers).json() == []
    assert client.get("/api/v1/time/entries", headers=auth_headers).json() == []
