from .account import Account
from .event import TaskEventRecord
from .ledger import TaskLedger
from .task import Task

# Export all models for easy importing
__all__ = ["Account", "Task", "TaskEventRecord", "TaskLedger"]
