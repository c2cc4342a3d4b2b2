"""
study_service.py: Study sessions and learning statistics.
"""

from datetime import timedelta

from sqlalchemy.orm import Session

from cortexia.models.study_session import StudySession
from cortexia.utils import utcnow, to_naive_utc


class StudyService:
    @staticmethod
    def _live(db: Session, user_id: int):
        return db.query(StudySession).filter(
            StudySession.user_id == user_id,
            StudySession.deleted_at.is_(None),
        )

    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> StudySession:
        s = StudySession(
            user_id=user_id,
            subject=data["subject"],
            topic=data.get("topic"),
            duration=data["duration"],
            pomodoros=data.get("pomodoros") or 0,
            difficulty=data.get("difficulty") or "medium",
            focus_quality=data.get("focus_quality"),
            notes=data.get("notes"),
            start_time=to_naive_utc(data.get("start_time")),
            end_time=to_naive_utc(data.get("end_time")),
        )
        try:
            db.add(s)
            db.commit()
            db.refresh(s)
            return s
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, subject: str | None = None) -> list[StudySession]:
        query = StudyService._live(db, user_id)
        if subject:
            query = query.filter(StudySession.subject == subject)
        return query.order_by(StudySession.created_at.desc(), StudySession.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, session_id: int) -> StudySession | None:
        return StudyService._live(db, user_id).filter(StudySession.id == session_id).first()

    @staticmethod
    def update(db: Session, user_id: int, session_id: int, data: dict) -> StudySession | None:
        s = StudyService.get_by_id(db, user_id, session_id)
        if not s:
            return None
        try:
            for k, v in data.items():
                if k in ("start_time", "end_time"):
                    setattr(s, k, to_naive_utc(v))
                elif hasattr(s, k) and k not in ("id", "user_id", "deleted_at"):
                    setattr(s, k, v)
            db.commit()
            db.refresh(s)
            return s
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, session_id: int) -> bool:
        s = StudyService.get_by_id(db, user_id, session_id)
        if not s:
            return False
        try:
            s.deleted_at = utcnow()
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int, days: int = 30) -> dict:
        since = utcnow() - timedelta(days=days)
        sessions = StudyService._live(db, user_id).filter(StudySession.created_at >= since).all()
        total = sum(s.duration for s in sessions)
        by_subject: dict[str, dict] = {}
        for s in sessions:
            bucket = by_subject.setdefault(s.subject, {"minutes": 0, "sessions": 0})
            bucket["minutes"] += s.duration
            bucket["sessions"] += 1

        avg_focus = (
            round(sum(s.focus_quality or 3 for s in sessions) / len(sessions), 1) if sessions else 0
        )
        return {
            "total_minutes": total,
            "total_hours": round(total / 60, 1),
            "total_pomodoros": sum(s.pomodoros or 0 for s in sessions),
            "avg_focus_quality": avg_focus,
            "session_count": len(sessions),
            "by_subject": by_subject,
        }
