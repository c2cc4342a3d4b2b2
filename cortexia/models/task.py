from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class Task(Base):
    __tablename__ = "tasks"
    __json_fields__ = ("tags", "subtasks")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    domain = Column(String(20), default="personal")  # work/health/study/personal/finance
    priority = Column(String(20), default="medium")  # low/medium/high/urgent
    status = Column(String(20), default="todo")  # todo/in-progress/completed
    due_date = Column(DateTime, nullable=True)
    time_estimate = Column(Integer, nullable=True)  # minutes
    time_spent = Column(Integer, default=0)  # minutes
    tags = Column(Text, nullable=True)  # JSON array string
    subtasks = Column(Text, nullable=True)  # JSON array of {id, title, completed, completed_at}
    order = Column(Integer, default=0)
    ai_priority_score = Column(Float, nullable=True)  # 0-100
    ai_reasoning = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    completed_at = Column(DateTime, nullable=True)
