from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class StudySession(Base):
    __tablename__ = "study_sessions"
    __hidden_fields__ = ("deleted_at",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(200), nullable=False)
    topic = Column(String(200), nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    pomodoros = Column(Integer, default=0)
    difficulty = Column(String(20), default="medium")  # easy/medium/hard
    focus_quality = Column(Integer, nullable=True)  # 1-5
    notes = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    deleted_at = Column(DateTime, nullable=True)
