"""
journal_service.py: Daily journaling and mood statistics.
"""

import json
from collections import Counter
from datetime import date, timedelta

from sqlalchemy.orm import Session

from cortexia.models.journal import JournalEntry
from cortexia.services.ai_service import AIService
from cortexia.utils import utcnow, today

_JSON_FIELDS = ("tags", "gratitude", "wins")


class JournalService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> JournalEntry:
        entry = JournalEntry(user_id=user_id, date=data.get("date") or today())
        for k, v in data.items():
            if k in _JSON_FIELDS:
                setattr(entry, k, json.dumps(v or []))
            elif hasattr(entry, k) and k not in ("id", "user_id", "date"):
                setattr(entry, k, v)
        try:
            db.add(entry)
            db.commit()
            db.refresh(entry)
            return entry
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, limit: int | None = None) -> list[JournalEntry]:
        query = db.query(JournalEntry).filter_by(user_id=user_id).order_by(
            JournalEntry.date.desc(), JournalEntry.id.desc()
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, entry_id: int) -> JournalEntry | None:
        return db.query(JournalEntry).filter_by(id=entry_id, user_id=user_id).first()

    @staticmethod
    def get_by_date(db: Session, user_id: int, d: date) -> JournalEntry | None:
        return db.query(JournalEntry).filter_by(user_id=user_id, date=d).order_by(JournalEntry.id.desc()).first()

    @staticmethod
    def update(db: Session, user_id: int, entry_id: int, data: dict) -> JournalEntry | None:
        entry = JournalService.get_by_id(db, user_id, entry_id)
        if not entry:
            return None
        try:
            for k, v in data.items():
                if k in _JSON_FIELDS:
                    setattr(entry, k, json.dumps(v or []))
                elif hasattr(entry, k) and k not in ("id", "user_id"):
                    setattr(entry, k, v)
            entry.updated_at = utcnow()
            db.commit()
            db.refresh(entry)
            return entry
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, entry_id: int) -> bool:
        entry = JournalService.get_by_id(db, user_id, entry_id)
        if not entry:
            return False
        try:
            db.delete(entry)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def calculate_streak(days_with_entries: set[date], as_of: date | None = None) -> int:
        curr = as_of or today()
        streak = 0
        while curr in days_with_entries:
            streak += 1
            curr -= timedelta(days=1)
        return streak

    @staticmethod
    def get_stats(db: Session, user_id: int, days: int = 30) -> dict:
        """Averages over the window; a missing score counts as 5."""
        since = today() - timedelta(days=days)
        entries = db.query(JournalEntry).filter(
            JournalEntry.user_id == user_id,
            JournalEntry.date >= since,
        ).all()
        n = len(entries)

        def avg(field):
            if not n:
                return 0
            return round(sum(getattr(e, field) or 5 for e in entries) / n, 1)

        tags = Counter()
        for e in entries:
            tags.update(json.loads(e.tags) if e.tags else [])

        all_days = {
            row[0] for row in db.query(JournalEntry.date).filter_by(user_id=user_id).all()
        }
        return {
            "total_entries": n,
            "avg_mood": avg("mood"),
            "avg_energy": avg("energy"),
            "avg_stress": avg("stress"),
            "top_tags": [t for t, _ in tags.most_common(5)],
            "streak": JournalService.calculate_streak(all_days),
        }

    @staticmethod
    async def summarize(db: Session, user_id: int, entry_id: int, llm_router) -> JournalEntry | None:
        entry = JournalService.get_by_id(db, user_id, entry_id)
        if not entry:
            return None
        summary = await AIService.summarize_journal(entry.content, llm_router)
        try:
            entry.ai_summary = summary
            db.commit()
            db.refresh(entry)
            return entry
        except Exception:
            db.rollback()
            raise
