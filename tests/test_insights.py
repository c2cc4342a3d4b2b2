# tests/test_insights.py

from datetime import datetime, timedelta

import pytest

from cortexia.services.insights_service import (
    task_score,
    habit_score,
    time_score,
    finance_score,
    goal_score,
    life_state_label,
    weighted_total,
    compute_life_state,
)
from cortexia.utils import today, utcnow

NOW = datetime(2026, 3, 10, 12, 0)


def test_empty_inputs_use_neutral_scores():
    assert task_score([], NOW) == 70
    assert habit_score([]) == 70
    assert time_score([]) == 70
    assert finance_score([]) == 80
    assert goal_score([]) == 70


def test_task_score_penalizes_overdue():
    tasks = [
        {"status": "completed", "due_date": None},
        {"status": "todo", "due_date": "2026-03-01T00:00:00"},
        {"status": "todo", "due_date": "2026-03-20T00:00:00"},
        {"status": "todo", "due_date": None},
    ]
    assert task_score(tasks, NOW) == 15
    many_overdue = [{"status": "todo", "due_date": "2026-01-01T00:00:00"}] * 6
    assert task_score(many_overdue, NOW) == 0


def test_habit_score():
    habits = [{"completed": True, "streak": 12}, {"completed": False, "streak": 0}]
    assert habit_score(habits) == 52
    assert habit_score([{"completed": True, "streak": 30}]) == 100


def test_time_score():
    entries = [{"duration": 60, "focus_quality": "deep"}, {"duration": 60, "focus_quality": "shallow"}]
    assert time_score(entries) == 75
    assert time_score([{"duration": 0, "focus_quality": "deep"}]) == 70


@pytest.mark.parametrize("income, expenses, expected", [
    (1000, 600, 100),
    (1000, 750, 85),
    (1000, 850, 70),
    (1000, 1000, 55),
    (1000, 1200, 20),
    (0, 400, 80),
    (0, 700, 60),
    (0, 1500, 40),
])
def test_finance_score(income, expenses, expected):
    txs = [{"type": "expense", "amount": expenses}]
    if income:
        txs.append({"type": "income", "amount": income})
    assert finance_score(txs) == expected


def test_goal_score():
    assert goal_score([{"status": "completed", "progress": 100}]) == 80
    goals = [{"status": "active", "progress": 40}, {"status": "active", "progress": 60}, {"status": "paused", "progress": 0}]
    assert goal_score(goals) == 50


@pytest.mark.parametrize("score, label", [
    (85, "HIGH_MOMENTUM"),
    (84, "ON_TRACK"),
    (70, "ON_TRACK"),
    (69, "STRATEGIC_PAUSE"),
    (50, "STRATEGIC_PAUSE"),
    (30, "DRIFTING"),
    (29, "BURNOUT_RISK"),
])
def test_life_state_label(score, label):
    assert life_state_label(score) == label


def test_weighted_total():
    assert weighted_total({"tasks": 100, "habits": 100, "time": 100, "finance": 100, "goals": 100}) == 100
    assert weighted_total({"tasks": 70, "habits": 70, "time": 70, "finance": 80, "goals": 70}) == 72


def test_compute_life_state():
    assert compute_life_state(0.9, 1.0, 8)["status"] == "momentum"
    assert compute_life_state(0.9, 1.0, 2)["status"] == "overloaded"
    assert compute_life_state(0.1, 0.0, 6)["status"] == "drifting"
    state = compute_life_state(0.5, 0.5, 5)
    assert state["status"] == "on-track"
    assert state["momentum"] == 50
    assert state["stress"] == 50
    assert state["wellbeing"] == 50
    assert state["focus"] == 50


def test_life_score_for_new_user(client, auth_headers):
    data = client.get("/api/v1/insights/life-score", headers=auth_headers).json()
    assert data["score"] == 72
    assert data["state"] == "ON_TRACK"
    assert data["explanation"] == "• 0/0 goals on track"
    assert data["breakdown"] == {"tasks": 70, "habits": 70, "time": 70, "finance": 80, "goals": 70}


def test_life_score_uses_llm_explanation(client, auth_headers, fake_router):
    fake_router.next_text = "• All good"
    data = client.get("/api/v1/insights/life-score", headers=auth_headers).json()
    assert data["explanation"] == "• All good"
    assert "Overall Score: 72/100" in fake_router.last_prompt


def test_life_state_endpoint(client, auth_headers):
    client.post("/api/v1/journal", json={"content": "meh", "mood": 3}, headers=auth_headers)
    state = client.get("/api/v1/insights/life-state", headers=auth_headers).json()
    assert state["stress"] == 70
    assert state["status"] == "drifting"


def test_local_insights(client, auth_headers):
    assert client.get("/api/v1/insights/local", headers=auth_headers).json() == {"insights": []}

    past = (utcnow() - timedelta(days=3)).isoformat()
    client.post("/api/v1/tasks", json={"title": "Taxes", "due_date": past}, headers=auth_headers)
    client.post(
        "/api/v1/finance/transactions",
        json={"type": "expense", "amount": 600, "category": "rent", "date": today().isoformat()},
        headers=auth_headers,
    )
    titles = [i["title"] for i in client.get("/api/v1/insights/local", headers=auth_headers).json()["insights"]]
    assert titles == ["Spending Alert", "Overdue Tasks"]


def test_productive_day_insight(client, auth_headers):
    for n in range(5):
        task_id = client.post("/api/v1/tasks", json={"title": f"t{n}"}, headers=auth_headers).json()["data"]["id"]
        client.post(f"/api/v1/tasks/{task_id}/complete", headers=auth_headers)
    insights = client.get("/api/v1/insights/local", headers=auth_headers).json()["insights"]
    assert insights[0]["title"] == "Productive Day"
    assert insights[0]["severity"] == "success"


def test_weekly_synthesis_and_briefing_fallbacks(client, auth_headers):
    client.post("/api/v1/tasks", json={"title": "Ship", "priority": "urgent"}, headers=auth_headers)

    synthesis = client.get("/api/v1/insights/weekly-synthesis", headers=auth_headers).json()
    assert synthesis["synthesis"].startswith("## Weekly Summary")
    assert synthesis["period"]["end"] == today().isoformat()

    briefing = client.get("/api/v1/insights/morning-briefing", headers=auth_headers).json()["briefing"]
    assert briefing == (
        "Good morning! You have 1 tasks today (1 urgent). 0 habits to track. Let's make it a great day!"
    )
