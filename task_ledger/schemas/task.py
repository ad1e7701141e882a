from pydantic import BaseModel
from typing import Optional

class TaskContent(BaseModel):
    """Body for creating or updating a task.

    Length is checked by the store so that empty and too-long content are
    reported as distinct errors.
    """
    content: str

class TaskCreate(TaskContent):
    """Schema for creating new tasks."""
    pass

class TaskUpdate(TaskContent):
    """Schema for replacing a task's content."""
    pass

class Task(BaseModel):
    """A task slot as stored. Deleted slots have empty content."""
    id: int
    owner: str
    content: str
    completed: bool
    created_at: int
    completed_at: int

    class Config:
        from_attributes = True

class TaskResponse(Task):
    """Task response schema for API responses."""
    pass

class TaskCount(BaseModel):
    owner: str
    count: int

class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int

    class Config:
        from_attributes = True

class TaskEvent(BaseModel):
    id: int
    event_type: str
    owner: str
    task_id: int
    content: Optional[str] = None
    timestamp: int

    class Config:
        from_attributes = True
