from sqlmodel import SQLModel, Field
from typing import Optional

class TaskEventRecord(SQLModel, table=True):
    """Persisted copy of every event published by the task store."""
    __tablename__ = "task_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    event_type: str = Field(max_length=32)
    owner: str = Field(index=True, max_length=42)
    task_id: int
    content: Optional[str] = None
    timestamp: int
