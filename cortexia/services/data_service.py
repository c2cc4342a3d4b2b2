"""
data_service.py: Whole-store operations for one user:
JSON export / import, delete-all, and mirroring to Supabase.
"""

import json
import logging
from datetime import date

from sqlalchemy import Date, DateTime
from sqlalchemy.orm import Session

from cortexia.models.task import Task
from cortexia.models.habit import Habit
from cortexia.models.habit_completion import HabitCompletion
from cortexia.models.goal import Goal
from cortexia.models.transaction import Transaction
from cortexia.models.budget import Budget
from cortexia.models.time_entry import TimeEntry
from cortexia.models.study_session import StudySession
from cortexia.models.journal import JournalEntry
from cortexia.models.user_settings import UserSettings
from cortexia.services.settings_service import SettingsService
from cortexia.supabase_client import get_supabase_admin
from cortexia.utils import utcnow, parse_datetime

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1

# Export key -> model, for every collection owned directly by a user
COLLECTIONS = {
    "tasks": Task,
    "goals": Goal,
    "transactions": Transaction,
    "budgets": Budget,
    "time_entries": TimeEntry,
    "study_sessions": StudySession,
    "journal_entries": JournalEntry,
}

_SKIP_ON_IMPORT = ("id", "user_id", "deleted_at")


def _row_from_dict(model, user_id: int, data: dict):
    """Build a model instance from an exported dict, coercing dates and JSON fields."""
    kwargs = {"user_id": user_id}
    for column in model.__table__.columns:
        name = column.name
        if name in _SKIP_ON_IMPORT or name not in data:
            continue
        value = data[name]
        if name in model.__json_fields__:
            value = json.dumps(value or [])
        elif isinstance(column.type, DateTime):
            value = parse_datetime(value)
        elif isinstance(column.type, Date) and isinstance(value, str):
            value = date.fromisoformat(value[:10])
        kwargs[name] = value
    return model(**kwargs)


class DataService:
    @staticmethod
    def _live(db: Session, model, user_id: int):
        query = db.query(model).filter(model.user_id == user_id)
        if hasattr(model, "deleted_at"):
            query = query.filter(model.deleted_at.is_(None))
        return query.order_by(model.id).all()

    @staticmethod
    def export(db: Session, user_id: int) -> dict:
        """The user's whole store as one JSON-ready document."""
        doc = {
            "version": EXPORT_VERSION,
            "exported_at": utcnow().isoformat(),
        }
        for key, model in COLLECTIONS.items():
            doc[key] = [row.to_dict() for row in DataService._live(db, model, user_id)]

        habits = []
        for h in DataService._live(db, Habit, user_id):
            completions = db.query(HabitCompletion).filter_by(habit_id=h.id).order_by(HabitCompletion.date).all()
            habits.append({**h.to_dict(), "completions": [c.to_dict() for c in completions]})
        doc["habits"] = habits
        doc["settings"] = SettingsService.get(db, user_id)
        return doc

    @staticmethod
    def _purge(db: Session, user_id: int) -> dict:
        counts = {}
        habit_ids = [h.id for h in db.query(Habit.id).filter_by(user_id=user_id).all()]
        if habit_ids:
            counts["habit_completions"] = db.query(HabitCompletion).filter(
                HabitCompletion.habit_id.in_(habit_ids)
            ).delete(synchronize_session=False)
        else:
            counts["habit_completions"] = 0
        counts["habits"] = db.query(Habit).filter_by(user_id=user_id).delete(synchronize_session=False)
        for key, model in COLLECTIONS.items():
            counts[key] = db.query(model).filter_by(user_id=user_id).delete(synchronize_session=False)
        counts["settings"] = db.query(UserSettings).filter_by(user_id=user_id).delete(synchronize_session=False)
        return counts

    @staticmethod
    def delete_all(db: Session, user_id: int) -> dict:
        """Remove every record the user owns. The account itself stays."""
        try:
            counts = DataService._purge(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Deleted all data for user {user_id}: {counts}")
        return counts

    @staticmethod
    def import_data(db: Session, user_id: int, doc: dict) -> dict:
        """Replace the user's store with an exported document. Ids are reassigned."""
        counts = {}
        try:
            DataService._purge(db, user_id)

            for key, model in COLLECTIONS.items():
                rows = [_row_from_dict(model, user_id, item) for item in doc.get(key) or []]
                db.add_all(rows)
                counts[key] = len(rows)

            counts["habits"] = 0
            counts["habit_completions"] = 0
            for item in doc.get("habits") or []:
                habit = _row_from_dict(Habit, user_id, item)
                db.add(habit)
                db.flush()
                counts["habits"] += 1
                for c in item.get("completions") or []:
                    db.add(HabitCompletion(
                        habit_id=habit.id,
                        date=date.fromisoformat(str(c["date"])[:10]),
                        completed=c.get("completed", True),
                        note=c.get("note"),
                    ))
                    counts["habit_completions"] += 1

            if doc.get("settings"):
                db.add(UserSettings(user_id=user_id, settings=json.dumps(doc["settings"])))
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Imported data for user {user_id}: {counts}")
        return counts

    @staticmethod
    def sync(db: Session, user_id: int) -> dict:
        """Upsert the exported rows into same-named Supabase tables."""
        client = get_supabase_admin()
        doc = DataService.export(db, user_id)
        synced = {}

        habits = doc["habits"]
        completions = [c for h in habits for c in h["completions"]]
        tables = {key: doc[key] for key in COLLECTIONS}
        tables["habits"] = [{k: v for k, v in h.items() if k != "completions"} for h in habits]
        tables["habit_completions"] = completions

        for table, rows in tables.items():
            if rows:
                client.table(table).upsert(rows).execute()
            synced[table] = len(rows)

        client.table("user_settings").upsert(
            {"user_id": user_id, "settings": doc["settings"], "updated_at": utcnow().isoformat()},
            on_conflict="user_id",
        ).execute()
        logger.info(f"Synced user {user_id} to Supabase: {synced}")
        return synced
