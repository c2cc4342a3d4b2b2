from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    settings = Column(Text, nullable=True)  # JSON document, see SettingsService.DEFAULTS
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
