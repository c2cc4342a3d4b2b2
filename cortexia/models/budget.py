from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint

from cortexia.database import Base


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category = Column(String(50), nullable=False)
    limit = Column(Float, nullable=False)
    period = Column(String(20), default="monthly")  # weekly/monthly

    __table_args__ = (
        UniqueConstraint("user_id", "category", "period", name="uq_budget_user_category_period"),
    )
