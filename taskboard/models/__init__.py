from .task import Task, TaskStatus, utcnow
from .user import User

__all__ = ["Task", "TaskStatus", "User", "utcnow"]
