# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from cortexia.models.user import User
from cortexia.models.task import Task
from cortexia.models.habit import Habit
from cortexia.models.habit_completion import HabitCompletion
from cortexia.models.goal import Goal
from cortexia.models.transaction import Transaction
from cortexia.models.budget import Budget
from cortexia.models.time_entry import TimeEntry
from cortexia.models.study_session import StudySession
from cortexia.models.journal import JournalEntry
from cortexia.models.user_settings import UserSettings

__all__ = [
    "User",
    "Task",
    "Habit",
    "HabitCompletion",
    "Goal",
    "Transaction",
    "Budget",
    "TimeEntry",
    "StudySession",
    "JournalEntry",
    "UserSettings",
]
