"""
Pydantic schemas for event planning tasks.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from eventplanning.models.task import TaskStatus
from eventplanning.schemas.common import CamelModel, to_naive_utc


class TaskCreate(CamelModel):
    """Schema for creating a task under an event."""
    event_id: int
    assigned_to_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class TaskUpdate(CamelModel):
    """Organizer update; omitted fields are left unchanged."""
    assigned_to_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class TaskResponse(CamelModel):
    id: int
    event_id: int
    assigned_to_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[datetime] = None
    created_at: datetime
