from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __hidden_fields__ = ("deleted_at",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    task = Column(String(500), nullable=False)
    category = Column(String(20), default="work")  # work/study/health/personal/leisure
    duration = Column(Integer, nullable=False)  # minutes
    date = Column(Date, nullable=False)
    focus_quality = Column(String(20), default="moderate")  # deep/moderate/shallow
    interruptions = Column(Integer, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    deleted_at = Column(DateTime, nullable=True)
