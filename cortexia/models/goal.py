from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class Goal(Base):
    __tablename__ = "goals"
    __json_fields__ = ("milestones",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), default="personal")  # personal/health/career/financial/education/family
    priority = Column(String(20), default="medium")  # low/medium/high
    target_date = Column(DateTime, nullable=True)
    progress = Column(Integer, default=0)  # 0-100
    status = Column(String(20), default="active")  # active/completed/paused/abandoned
    milestones = Column(Text, nullable=True)  # JSON array of {id, title, target_date, completed, completed_at}
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    completed_at = Column(DateTime, nullable=True)
