"""
time_service.py: Time tracking entries and focus statistics.
Deleted entries are kept with deleted_at set and hidden everywhere.
"""

from sqlalchemy.orm import Session

from cortexia.models.time_entry import TimeEntry
from cortexia.services.settings_service import SettingsService
from cortexia.utils import utcnow, today, start_of_week


def _by_category(entries: list[TimeEntry]) -> dict[str, int]:
    out: dict[str, int] = {}
    for e in entries:
        out[e.category] = out.get(e.category, 0) + e.duration
    return out


class TimeService:
    @staticmethod
    def _live(db: Session, user_id: int):
        return db.query(TimeEntry).filter(
            TimeEntry.user_id == user_id,
            TimeEntry.deleted_at.is_(None),
        )

    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> TimeEntry:
        entry = TimeEntry(
            user_id=user_id,
            task=data["task"],
            category=data.get("category") or "work",
            duration=data["duration"],
            date=data.get("date") or today(),
            focus_quality=data.get("focus_quality") or "moderate",
            interruptions=data.get("interruptions") or 0,
            notes=data.get("notes"),
        )
        try:
            db.add(entry)
            db.commit()
            db.refresh(entry)
            return entry
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, filters: dict | None = None) -> list[TimeEntry]:
        filters = filters or {}
        query = TimeService._live(db, user_id)
        if filters.get("category"):
            query = query.filter(TimeEntry.category == filters["category"])
        if filters.get("date"):
            query = query.filter(TimeEntry.date == filters["date"])
        return query.order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, entry_id: int) -> TimeEntry | None:
        return TimeService._live(db, user_id).filter(TimeEntry.id == entry_id).first()

    @staticmethod
    def update(db: Session, user_id: int, entry_id: int, data: dict) -> TimeEntry | None:
        entry = TimeService.get_by_id(db, user_id, entry_id)
        if not entry:
            return None
        try:
            for k, v in data.items():
                if hasattr(entry, k) and k not in ("id", "user_id", "deleted_at"):
                    setattr(entry, k, v)
            db.commit()
            db.refresh(entry)
            return entry
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, entry_id: int) -> bool:
        entry = TimeService.get_by_id(db, user_id, entry_id)
        if not entry:
            return False
        try:
            entry.deleted_at = utcnow()
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def today_stats(db: Session, user_id: int) -> dict:
        entries = TimeService._live(db, user_id).filter(TimeEntry.date == today()).all()
        return {
            "total_minutes": sum(e.duration for e in entries),
            "deep_focus_minutes": sum(e.duration for e in entries if e.focus_quality == "deep"),
            "total_interruptions": sum(e.interruptions or 0 for e in entries),
            "entries": len(entries),
            "by_category": _by_category(entries),
        }

    @staticmethod
    def weekly_stats(db: Session, user_id: int) -> dict:
        first_day = SettingsService.start_of_week(db, user_id)
        week_start = start_of_week(today(), first_day)
        entries = TimeService._live(db, user_id).filter(TimeEntry.date >= week_start).all()
        total = sum(e.duration for e in entries)
        return {
            "week_start": week_start.isoformat(),
            "total_minutes": total,
            "by_category": _by_category(entries),
            "entries": len(entries),
            "avg_daily_minutes": round(total / 7),
        }

    @staticmethod
    def focus_breakdown(db: Session, user_id: int) -> dict:
        """Hours and share of total time per focus quality."""
        entries = TimeService._live(db, user_id).all()
        total = sum(e.duration for e in entries)
        out = {}
        for quality in ("deep", "moderate", "shallow"):
            minutes = sum(e.duration for e in entries if e.focus_quality == quality)
            out[quality] = {
                "hours": round(minutes / 60, 1),
                "percentage": round(minutes / total * 100) if total else 0,
            }
        return out
