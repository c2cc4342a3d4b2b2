"""
insights_service.py: Life Score, Life State and rule-based insight cards.

The score functions take plain API-shaped dicts so they can be evaluated
without a database; InsightsService gathers those dicts for one user.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from cortexia.models.task import Task
from cortexia.models.goal import Goal
from cortexia.models.transaction import Transaction
from cortexia.models.time_entry import TimeEntry
from cortexia.models.journal import JournalEntry
from cortexia.models.budget import Budget
from cortexia.models.habit_completion import HabitCompletion
from cortexia.services.ai_service import AIService
from cortexia.services.habit_service import HabitService
from cortexia.services.finance_service import period_start
from cortexia.utils import utcnow, today, parse_datetime

logger = logging.getLogger(__name__)

WEIGHTS = {"tasks": 0.25, "habits": 0.25, "time": 0.2, "finance": 0.15, "goals": 0.15}

# Weekly limit used in the explanation when the user has no weekly budgets
DEFAULT_WEEKLY_LIMIT = 1000


def _is_overdue(task: dict, now: datetime) -> bool:
    due = parse_datetime(task.get("due_date"))
    return due is not None and due < now and task.get("status") != "completed"


def task_score(tasks: list[dict], now: datetime | None = None) -> int:
    if not tasks:
        return 70
    now = now or utcnow()
    completed = sum(1 for t in tasks if t.get("status") == "completed")
    overdue = sum(1 for t in tasks if _is_overdue(t, now))
    completion_rate = completed / len(tasks)
    return max(0, round(completion_rate * 100 - min(overdue * 10, 40)))


def habit_score(habits: list[dict]) -> int:
    """habits: [{completed (today), streak}]"""
    if not habits:
        return 70
    done = sum(1 for h in habits if h.get("completed"))
    avg_streak = sum(h.get("streak") or 0 for h in habits) / len(habits)
    return min(100, round(done / len(habits) * 80 + min(avg_streak * 2, 20)))


def time_score(entries: list[dict]) -> int:
    if not entries:
        return 70
    total = sum(e.get("duration") or 0 for e in entries)
    if total == 0:
        return 70
    deep = sum(e.get("duration") or 0 for e in entries if e.get("focus_quality") == "deep")
    return round(50 + deep / total * 50)


def finance_score(transactions: list[dict]) -> int:
    if not transactions:
        return 80
    expenses = sum(abs(t["amount"]) for t in transactions if t.get("type") == "expense")
    income = sum(t["amount"] for t in transactions if t.get("type") == "income")

    if income == 0:
        return 80 if expenses < 500 else 60 if expenses < 1000 else 40

    savings_rate = (income - expenses) / income
    if savings_rate >= 0.3:
        return 100
    if savings_rate >= 0.2:
        return 85
    if savings_rate >= 0.1:
        return 70
    if savings_rate >= 0:
        return 55
    return max(0, round(40 + savings_rate * 100))


def goal_score(goals: list[dict]) -> int:
    if not goals:
        return 70
    active = [g for g in goals if g.get("status") == "active"]
    if not active:
        return 80
    return round(sum(g.get("progress") or 0 for g in active) / len(active))


def life_state_label(score: float) -> str:
    if score >= 85:
        return "HIGH_MOMENTUM"
    if score >= 70:
        return "ON_TRACK"
    if score >= 50:
        return "STRATEGIC_PAUSE"
    if score >= 30:
        return "DRIFTING"
    return "BURNOUT_RISK"


def weighted_total(breakdown: dict) -> int:
    return round(sum(breakdown[k] * w for k, w in WEIGHTS.items()))


def compute_life_state(task_completion_rate: float, habit_done_rate: float, avg_mood: float) -> dict:
    momentum = round(task_completion_rate * 100)
    stress = round((10 - avg_mood) * 10)
    state = {
        "status": "on-track",
        "momentum": momentum,
        "stress": stress,
        "productivity": momentum,
        "wellbeing": round(avg_mood * 10),
        "focus": round(habit_done_rate * 100),
        "last_updated": utcnow().isoformat(),
    }
    if stress > 70:
        state["status"] = "overloaded"
    elif momentum < 30:
        state["status"] = "drifting"
    elif momentum > 80 and stress < 40:
        state["status"] = "momentum"
    return state


class InsightsService:
    @staticmethod
    def _habit_rows(db: Session, user_id: int) -> list[dict]:
        return [
            {**h, "completed": h["completed_today"]}
            for h in HabitService.get_today(db, user_id)
        ]

    @staticmethod
    def _gather(db: Session, user_id: int) -> dict:
        now = utcnow()
        week_ago = today() - timedelta(days=7)
        return {
            "tasks": [t.to_dict() for t in db.query(Task).filter_by(user_id=user_id).all()],
            "habits": InsightsService._habit_rows(db, user_id),
            "time_entries": [
                e.to_dict() for e in db.query(TimeEntry).filter(
                    TimeEntry.user_id == user_id,
                    TimeEntry.deleted_at.is_(None),
                    TimeEntry.date >= week_ago,
                ).all()
            ],
            "transactions": [
                t.to_dict() for t in db.query(Transaction).filter(
                    Transaction.user_id == user_id,
                    Transaction.date >= period_start("month"),
                ).all()
            ],
            "goals": [g.to_dict() for g in db.query(Goal).filter_by(user_id=user_id).all()],
            "now": now,
        }

    @staticmethod
    def _scores(data: dict) -> dict:
        return {
            "tasks": task_score(data["tasks"], data["now"]),
            "habits": habit_score(data["habits"]),
            "time": time_score(data["time_entries"]),
            "finance": finance_score(data["transactions"]),
            "goals": goal_score(data["goals"]),
        }

    @staticmethod
    def _week_spent(db: Session, user_id: int) -> float:
        rows = db.query(Transaction).filter(
            Transaction.user_id == user_id,
            Transaction.type == "expense",
            Transaction.date > today() - timedelta(days=7),
        ).all()
        return sum(t.amount for t in rows)

    @staticmethod
    async def life_score(db: Session, user_id: int, llm_router) -> dict:
        data = InsightsService._gather(db, user_id)
        breakdown = InsightsService._scores(data)
        score = weighted_total(breakdown)

        weekly_limits = db.query(Budget).filter_by(user_id=user_id, period="weekly").all()
        explanation = await AIService.generate_life_score_explanation({
            "score": score,
            "tasks": {
                "pending": sum(1 for t in data["tasks"] if t["status"] != "completed"),
                "completed": sum(1 for t in data["tasks"] if t["status"] == "completed"),
            },
            "habits": {
                "done": sum(1 for h in data["habits"] if h["completed"]),
                "total": len(data["habits"]),
            },
            "budget": {
                "spent": round(InsightsService._week_spent(db, user_id), 2),
                "limit": sum(b.limit for b in weekly_limits) or DEFAULT_WEEKLY_LIMIT,
            },
            "goals": {
                "on_track": sum(1 for g in data["goals"] if (g["progress"] or 0) >= 50),
                "total": len(data["goals"]),
            },
        }, llm_router)

        return {
            "score": score,
            "state": life_state_label(score),
            "explanation": explanation,
            "breakdown": breakdown,
            "last_updated": data["now"].isoformat(),
        }

    @staticmethod
    def life_state(db: Session, user_id: int) -> dict:
        tasks = db.query(Task).filter_by(user_id=user_id).all()
        completed = sum(1 for t in tasks if t.status == "completed")
        completion_rate = completed / len(tasks) if tasks else 0

        habits = InsightsService._habit_rows(db, user_id)
        habit_rate = sum(1 for h in habits if h["completed"]) / len(habits) if habits else 0

        moods = [m[0] for m in db.query(JournalEntry.mood).filter_by(user_id=user_id).all()]
        avg_mood = sum(m or 5 for m in moods) / len(moods) if moods else 5

        return compute_life_state(completion_rate, habit_rate, avg_mood)

    @staticmethod
    def local_insights(db: Session, user_id: int) -> list[dict]:
        """Rule-based insight cards computed from the user's records."""
        insights = []
        now = utcnow()

        good_habits = [h for h in HabitService.get_all(db, user_id) if (h.streak or 0) > 5]
        if good_habits:
            insights.append({
                "type": "achievement",
                "title": "Consistent Habits Detected",
                "content": f"You've maintained {len(good_habits)} habit(s) for over 5 days straight. Great momentum!",
                "severity": "success",
                "actionable": False,
            })

        day_start = datetime.combine(today(), datetime.min.time())
        completed_today = db.query(Task).filter(
            Task.user_id == user_id,
            Task.completed_at.isnot(None),
            Task.completed_at >= day_start,
        ).count()
        if completed_today >= 5:
            insights.append({
                "type": "achievement",
                "title": "Productive Day",
                "content": f"You've completed {completed_today} tasks today. You're crushing it!",
                "severity": "success",
                "actionable": False,
            })

        week_spent = InsightsService._week_spent(db, user_id)
        if week_spent > 500:
            insights.append({
                "type": "warning",
                "title": "Spending Alert",
                "content": f"You've spent ${week_spent:.2f} this week. Consider reviewing your budget.",
                "severity": "warning",
                "actionable": True,
            })

        overdue = [
            t for t in db.query(Task).filter_by(user_id=user_id).order_by(Task.due_date).all()
            if t.status != "completed" and t.due_date is not None and t.due_date < now
        ]
        if overdue:
            insights.append({
                "type": "warning",
                "title": "Overdue Tasks",
                "content": f'You have {len(overdue)} overdue task(s). Consider prioritizing "{overdue[0].title}".',
                "severity": "warning",
                "actionable": True,
            })
        return insights

    @staticmethod
    async def weekly_synthesis(db: Session, user_id: int, llm_router) -> dict:
        week_ago = today() - timedelta(days=7)
        since = utcnow() - timedelta(days=7)
        habit_ids = [h.id for h in HabitService.get_all(db, user_id)]
        completions = []
        if habit_ids:
            completions = [
                c.to_dict() for c in db.query(HabitCompletion).filter(
                    HabitCompletion.habit_id.in_(habit_ids),
                    HabitCompletion.date >= week_ago,
                ).all()
            ]
        data = {
            "tasks": [
                t.to_dict() for t in db.query(Task).filter(
                    Task.user_id == user_id, Task.updated_at >= since,
                ).all()
            ],
            "habits": completions,
            "time_entries": [
                e.to_dict() for e in db.query(TimeEntry).filter(
                    TimeEntry.user_id == user_id,
                    TimeEntry.deleted_at.is_(None),
                    TimeEntry.date >= week_ago,
                ).all()
            ],
            "transactions": [
                t.to_dict() for t in db.query(Transaction).filter(
                    Transaction.user_id == user_id, Transaction.date >= week_ago,
                ).all()
            ],
            "goals": [g.to_dict() for g in db.query(Goal).filter_by(user_id=user_id).all()],
            "journal_entries": [
                j.to_dict() for j in db.query(JournalEntry).filter(
                    JournalEntry.user_id == user_id, JournalEntry.date >= week_ago,
                ).all()
            ],
        }
        synthesis = await AIService.generate_weekly_synthesis(data, llm_router)
        return {
            "synthesis": synthesis,
            "period": {"start": week_ago.isoformat(), "end": today().isoformat()},
            "generated_at": utcnow().isoformat(),
        }

    @staticmethod
    async def morning_briefing(db: Session, user_id: int, llm_router) -> dict:
        now = utcnow()
        pending = [
            t.to_dict() for t in db.query(Task).filter(
                Task.user_id == user_id, Task.status != "completed",
            ).all()
        ]
        week_ahead = now + timedelta(days=7)
        deadlines = []
        for t in pending:
            due = parse_datetime(t["due_date"])
            if due is not None and now <= due <= week_ahead:
                deadlines.append(t)
        yesterday = db.query(JournalEntry).filter_by(
            user_id=user_id, date=today() - timedelta(days=1)
        ).first()

        briefing = await AIService.generate_morning_briefing({
            "pending_tasks": pending,
            "today_habits": HabitService.get_today(db, user_id),
            "upcoming_deadlines": deadlines,
            "yesterday_mood": yesterday.mood if yesterday else None,
        }, llm_router)
        return {"briefing": briefing, "generated_at": now.isoformat()}
