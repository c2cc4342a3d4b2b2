from sqlalchemy import Column, Integer, Text, Date, Boolean, ForeignKey, UniqueConstraint

from cortexia.database import Base


class HabitCompletion(Base):
    __tablename__ = "habit_completions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    habit_id = Column(Integer, ForeignKey("habits.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    completed = Column(Boolean, default=True)
    note = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_completion_date"),
    )
