from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), default="health")  # health/productivity/learning/fitness/mindfulness/social
    frequency = Column(String(20), default="daily")  # daily/weekly/monthly
    color = Column(String(20), nullable=True)
    target_days_per_week = Column(Integer, nullable=True)
    active = Column(Boolean, default=True)
    streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    created_at = Column(DateTime, default=utcnow)
