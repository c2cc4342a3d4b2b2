from sqlalchemy import Column, Integer, String, DateTime

from cortexia.database import Base
from cortexia.utils import utcnow


class User(Base):
    __tablename__ = "users"
    __hidden_fields__ = ("hashed_password",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow)
