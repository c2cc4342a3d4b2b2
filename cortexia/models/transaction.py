from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey

from cortexia.database import Base
from cortexia.utils import utcnow


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    type = Column(String(20), nullable=False)  # income/expense
    category = Column(String(50), nullable=False)  # food/transport/entertainment/health/learning/utilities/salary/other
    description = Column(String(500), nullable=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow)
