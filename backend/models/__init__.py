# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.weekly_goal import WeeklyGoal
from models.task import Task
from models.user_progress import UserProgress
from models.reference import Reference

# Table name -> ORM class, used by the SQL store
TABLES = {
    "weekly_goals": WeeklyGoal,
    "tasks": Task,
    "user_progress": UserProgress,
}

__all__ = [
    "WeeklyGoal",
    "Task",
    "UserProgress",
    "Reference",
    "TABLES",
]
