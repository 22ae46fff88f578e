from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from ..models import TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating new tasks."""
    title: str
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """Schema for editing a task. Only fields sent by the client change."""
    title: Optional[str] = None
    description: Optional[str] = None


class TaskStatusChange(BaseModel):
    # Plain string so an unknown label reaches the lifecycle check.
    status: str


class Task(BaseModel):
    """Complete task schema with all fields."""
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
