"""Models exposed by the Apex Hour planner."""
from .kv_record import KVRecord
from .task import Task
from .user_settings import UserSettings

__all__ = ["KVRecord", "Task", "UserSettings"]
