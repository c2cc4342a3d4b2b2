from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class JournalEntry(Base):
    __tablename__ = "journal_entries"
    __json_fields__ = ("tags", "gratitude", "wins")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    title = Column(String(300), nullable=True)
    content = Column(Text, nullable=False)
    mood = Column(Integer, nullable=True)  # 1-10
    energy = Column(Integer, nullable=True)  # 1-10
    stress = Column(Integer, nullable=True)  # 1-10
    focus = Column(Integer, nullable=True)  # 1-10
    tags = Column(Text, nullable=True)  # JSON array
    gratitude = Column(Text, nullable=True)  # JSON array of strings
    wins = Column(Text, nullable=True)  # JSON array of strings
    ai_summary = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
