"""
quick_add_service.py: Quick Add
Classifies one line of free text into a record type with ordered regex rules,
then creates the matching record.
"""

import logging
import math
import re
from datetime import timedelta

from sqlalchemy.orm import Session

from cortexia.models.habit import Habit
from cortexia.services.task_service import TaskService
from cortexia.services.habit_service import HabitService
from cortexia.services.goal_service import GoalService
from cortexia.services.finance_service import FinanceService
from cortexia.services.time_service import TimeService
from cortexia.services.study_service import StudyService
from cortexia.services.journal_service import JournalService
from cortexia.utils import utcnow, today

logger = logging.getLogger(__name__)

EXPENSE_RE = re.compile(r"spent|\$|paid|bought|cost")
AMOUNT_RE = re.compile(r"\$?(\d+(?:\.\d{2})?)")
TIME_RE = re.compile(r"worked|for \d+\s*(h|hours?|min|minutes?)")
DURATION_RE = re.compile(r"(\d+)\s*(?:hours?|h|minutes?|min|m)", re.IGNORECASE)
HOURS_RE = re.compile(r"hours?|h", re.IGNORECASE)
TRAILING_FOR_RE = re.compile(r"for \d+.*$", re.IGNORECASE)
STUDY_RE = re.compile(r"studied|learning|read.*chapter|practicing")
STUDY_STRIP_RE = re.compile(r"studied|for \d+.*$", re.IGNORECASE)
HABIT_RE = re.compile(r"did|completed|finished|went to gym|meditated|exercised|drank water")
JOURNAL_RE = re.compile(r"feeling|mood|today was|grateful|stressed|happy|sad|anxious")
GOAL_RE = re.compile(r"goal|want to|aim to|plan to|achieve")


def _has(text: str, *words: str) -> bool:
    return any(w in text for w in words)


def _duration(text: str) -> int:
    """Minutes mentioned in the text, hours converted; 30 when none."""
    match = DURATION_RE.search(text)
    if not match:
        return 30
    value = int(match.group(1))
    return value * 60 if HOURS_RE.search(match.group(0)) else value


class QuickAddService:
    @staticmethod
    def parse(text: str) -> dict:
        """Return {type, data, confidence}. The first matching rule wins."""
        text = text.strip()
        lower = text.lower()

        if EXPENSE_RE.search(lower):
            amount_match = AMOUNT_RE.search(text)
            if _has(lower, "food", "lunch", "dinner", "coffee"):
                category = "food"
            elif _has(lower, "uber", "taxi", "transport", "gas"):
                category = "transport"
            elif _has(lower, "movie", "netflix", "game"):
                category = "entertainment"
            else:
                category = "other"
            return {
                "type": "expense",
                "data": {
                    "amount": float(amount_match.group(1)) if amount_match else 0.0,
                    "category": category,
                    "description": text,
                    "type": "expense",
                },
                "confidence": 0.9,
            }

        if TIME_RE.search(lower):
            return {
                "type": "time",
                "data": {
                    "task": TRAILING_FOR_RE.sub("", text).strip(),
                    "duration": _duration(text),
                    "category": "study" if "study" in lower else "work",
                },
                "confidence": 0.85,
            }

        if STUDY_RE.search(lower):
            return {
                "type": "study",
                "data": {
                    "subject": STUDY_STRIP_RE.sub("", text).strip() or "General",
                    "duration": _duration(text),
                },
                "confidence": 0.85,
            }

        if HABIT_RE.search(lower):
            return {
                "type": "habit",
                "data": {"name": text, "completed": True},
                "confidence": 0.8,
            }

        if JOURNAL_RE.search(lower):
            happy = _has(lower, "happy", "great")
            if happy:
                mood = "happy"
            elif _has(lower, "sad", "stressed"):
                mood = "difficult"
            else:
                mood = "neutral"
            return {
                "type": "journal",
                "data": {
                    "content": text,
                    "mood": mood,
                    "mood_score": 8 if happy else 4 if "sad" in lower else 6,
                },
                "confidence": 0.75,
            }

        if GOAL_RE.search(lower):
            return {
                "type": "goal",
                "data": {"title": text, "category": "personal"},
                "confidence": 0.7,
            }

        if "work" in lower:
            domain = "work"
        elif _has(lower, "health", "gym"):
            domain = "health"
        elif _has(lower, "study", "learn"):
            domain = "study"
        else:
            domain = "personal"
        return {
            "type": "task",
            "data": {
                "title": text,
                "domain": domain,
                "priority": "high" if _has(lower, "urgent", "asap") else "medium",
            },
            "confidence": 0.6,
        }

    @staticmethod
    def _find_habit(db: Session, user_id: int, text: str) -> Habit | None:
        """Exact case-insensitive name first, then a habit whose name appears in the text."""
        lower = text.lower()
        habits = HabitService.get_all(db, user_id)
        for h in habits:
            if h.name.lower() == lower:
                return h
        for h in habits:
            if h.name.lower() in lower:
                return h
        return None

    @staticmethod
    async def commit(db: Session, user_id: int, text: str, llm_router=None) -> dict:
        """Parse *text* and create the record it describes.

        Raises ValueError when the text carries a zero amount or duration.
        """
        parsed = QuickAddService.parse(text)
        kind, data = parsed["type"], parsed["data"]
        if kind == "expense" and data["amount"] <= 0:
            raise ValueError("Expense amount must be greater than 0")
        if kind in ("time", "study") and data["duration"] < 1:
            raise ValueError("Duration must be at least 1 minute")
        now = utcnow()

        if kind == "expense":
            record = FinanceService.create_transaction(db, user_id, {
                "type": "expense",
                "amount": data["amount"],
                "category": data["category"],
                "description": data["description"],
                "date": today(),
            }).to_dict()
        elif kind == "time":
            record = TimeService.create(db, user_id, {
                "task": data["task"] or text,
                "category": data["category"],
                "duration": data["duration"],
                "date": today(),
                "focus_quality": "moderate",
                "interruptions": 0,
            }).to_dict()
        elif kind == "study":
            record = StudyService.create(db, user_id, {
                "subject": data["subject"],
                "duration": data["duration"],
                "pomodoros": math.ceil(data["duration"] / 25),
                "difficulty": "medium",
                "start_time": now,
                "end_time": now + timedelta(minutes=data["duration"]),
            }).to_dict()
        elif kind == "habit":
            habit = QuickAddService._find_habit(db, user_id, data["name"])
            if habit is None:
                habit = HabitService.create(db, user_id, {"name": data["name"]})
            record = HabitService.check_in(db, user_id, habit.id, completed=True)
            record["habit"] = habit.to_dict()
        elif kind == "journal":
            record = JournalService.create(db, user_id, {
                "title": "Quick Entry",
                "content": data["content"],
                "mood": data["mood_score"],
                "energy": 5,
                "focus": 5,
                "date": today(),
            }).to_dict()
        elif kind == "goal":
            record = GoalService.create(db, user_id, {
                "title": data["title"],
                "category": data["category"],
                "priority": "medium",
                "target_date": now + timedelta(days=90),
                "milestones": [],
            }).to_dict()
        else:
            task = await TaskService.create(db, user_id, {
                "title": data["title"],
                "domain": data["domain"],
                "priority": data["priority"],
                "status": "todo",
            }, llm_router)
            record = task.to_dict()

        logger.info(f"Quick add created a {kind} for user {user_id}")
        return {**parsed, "record": record}
