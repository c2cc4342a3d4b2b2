"""
habit_service.py: Habits & Streaks tracking
Check-ins per day, streaks counted backward from today, and stats.
"""

import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from cortexia.models.habit import Habit
from cortexia.models.habit_completion import HabitCompletion
from cortexia.utils import today

logger = logging.getLogger(__name__)

MILESTONES = [7, 14, 21, 30, 60, 90, 100, 365]


def _count_back(days: set[date], start: date) -> int:
    streak = 0
    curr = start
    while curr in days:
        streak += 1
        curr -= timedelta(days=1)
    return streak


class HabitService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Habit:
        h = Habit(user_id=user_id, **{k: v for k, v in data.items() if hasattr(Habit, k)})
        try:
            db.add(h)
            db.commit()
            db.refresh(h)
            return h
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_by_id(db: Session, user_id: int, habit_id: int) -> Habit | None:
        return db.query(Habit).filter_by(id=habit_id, user_id=user_id).first()

    @staticmethod
    def get_all(db: Session, user_id: int) -> list[Habit]:
        habits = db.query(Habit).filter_by(user_id=user_id).order_by(Habit.created_at, Habit.id).all()
        return HabitService.refresh_streaks(db, habits)

    @staticmethod
    def refresh_streaks(db: Session, habits: list[Habit]) -> list[Habit]:
        """Recount stored streaks against today so a run that ended earlier reads as 0."""
        if not habits:
            return habits
        rows = db.query(HabitCompletion.habit_id, HabitCompletion.date).filter(
            HabitCompletion.habit_id.in_([h.id for h in habits]),
            HabitCompletion.completed.is_(True),
        ).all()
        days: dict[int, set[date]] = {}
        for habit_id, d in rows:
            days.setdefault(habit_id, set()).add(d)

        start = today()
        changed = False
        for h in habits:
            streak = _count_back(days.get(h.id, set()), start)
            if streak != (h.streak or 0):
                h.streak = streak
                h.longest_streak = max(h.longest_streak or 0, streak)
                changed = True
        if changed:
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
        return habits

    @staticmethod
    def update(db: Session, user_id: int, habit_id: int, data: dict) -> Habit | None:
        h = HabitService.get_by_id(db, user_id, habit_id)
        if not h:
            return None
        try:
            for k, v in data.items():
                if hasattr(h, k) and k not in ("id", "user_id"):
                    setattr(h, k, v)
            db.commit()
            db.refresh(h)
            return h
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, habit_id: int) -> bool:
        h = HabitService.get_by_id(db, user_id, habit_id)
        if not h:
            return False
        try:
            db.query(HabitCompletion).filter_by(habit_id=habit_id).delete()
            db.delete(h)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def calculate_streak(db: Session, habit_id: int, as_of: date | None = None) -> int:
        """Consecutive completed days ending today. A missing today means 0."""
        days = {
            c.date
            for c in db.query(HabitCompletion).filter_by(habit_id=habit_id, completed=True).all()
        }
        return _count_back(days, as_of or today())

    @staticmethod
    def check_in(db: Session, user_id: int, habit_id: int, d: date | None = None,
                 completed: bool | None = None, note: str | None = None) -> dict | None:
        """Toggle (or set) the completion for a day, then refresh streaks."""
        h = HabitService.get_by_id(db, user_id, habit_id)
        if not h:
            return None
        d = d or today()

        try:
            log = db.query(HabitCompletion).filter_by(habit_id=habit_id, date=d).first()
            if log:
                log.completed = (not log.completed) if completed is None else completed
                if note is not None:
                    log.note = note
            else:
                log = HabitCompletion(
                    habit_id=habit_id,
                    date=d,
                    completed=True if completed is None else completed,
                    note=note,
                )
                db.add(log)
            db.flush()

            streak = HabitService.calculate_streak(db, habit_id)
            h.streak = streak
            h.longest_streak = max(h.longest_streak or 0, streak)
            db.commit()
            db.refresh(log)
            db.refresh(h)
        except Exception:
            db.rollback()
            raise

        reached = log.completed and streak in MILESTONES
        if reached:
            logger.info(f"Habit {habit_id} reached a {streak}-day milestone")
        return {
            "completion": log.to_dict(),
            "streak": h.streak,
            "longest_streak": h.longest_streak,
            "milestone_reached": reached,
            "milestone_type": f"{streak} days" if reached else None,
        }

    @staticmethod
    def get_logs(db: Session, user_id: int, habit_id: int, days: int = 30) -> list[HabitCompletion] | None:
        if not HabitService.get_by_id(db, user_id, habit_id):
            return None
        start = today() - timedelta(days=days)
        return db.query(HabitCompletion).filter(
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.date >= start,
        ).order_by(HabitCompletion.date.desc()).all()

    @staticmethod
    def completed_today_ids(db: Session, habit_ids: list[int]) -> set[int]:
        if not habit_ids:
            return set()
        rows = db.query(HabitCompletion.habit_id).filter(
            HabitCompletion.habit_id.in_(habit_ids),
            HabitCompletion.date == today(),
            HabitCompletion.completed.is_(True),
        ).all()
        return {r[0] for r in rows}

    @staticmethod
    def get_today(db: Session, user_id: int) -> list[dict]:
        """Active habits with today's status."""
        habits = [h for h in HabitService.get_all(db, user_id) if h.active]
        done = HabitService.completed_today_ids(db, [h.id for h in habits])
        return [{**h.to_dict(), "completed_today": h.id in done} for h in habits]

    @staticmethod
    def get_stats(db: Session, user_id: int) -> dict:
        habits = [h for h in HabitService.get_all(db, user_id) if h.active]
        done = HabitService.completed_today_ids(db, [h.id for h in habits])
        total = len(habits)
        return {
            "total": total,
            "completed_today": len(done),
            "avg_streak": round(sum(h.streak or 0 for h in habits) / total, 1) if total else 0,
            "longest_streak": max((h.longest_streak or 0 for h in habits), default=0),
        }
