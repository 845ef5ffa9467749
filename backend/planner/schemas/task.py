"""
Task schemas.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import Field

from planner.schemas.base import CamelModel

TaskStatus = Literal["pending", "in_progress", "blocked", "completed"]
RecurrenceFrequency = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]

TASK_STATUSES = ("pending", "in_progress", "blocked", "completed")


class Recurrence(CamelModel):
    frequency: RecurrenceFrequency
    interval: int = Field(default=1, ge=1)
    end_date: Optional[date] = None


class TaskCreate(CamelModel):
    project_id: UUID
    area_id: Optional[UUID] = None
    responsibility_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    assignee_id: Optional[UUID] = None
    deadline: Optional[date] = None
    status: TaskStatus = "pending"
    support_resources: Optional[List[str]] = None
    depends_on: List[UUID] = []
    template_id: Optional[UUID] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[Recurrence] = None


class TaskUpdate(CamelModel):
    project_id: Optional[UUID] = None
    area_id: Optional[UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[UUID] = None
    deadline: Optional[date] = None
    status: Optional[TaskStatus] = None
    support_resources: Optional[List[str]] = None
    depends_on: Optional[List[UUID]] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[Recurrence] = None


class TaskResponse(CamelModel):
    id: UUID
    project_id: UUID
    area_id: Optional[UUID] = None
    responsibility_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    assignee_id: Optional[UUID] = None
    deadline: Optional[date] = None
    status: str = "pending"
    support_resources: Optional[List[str]] = None
    depends_on: List[UUID] = []
    template_id: Optional[UUID] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[Recurrence] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskRequest(CamelModel):
    """Body of task create and update requests."""

    project_id: Optional[str] = None
    area_id: Optional[str] = None
    responsibility_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[str] = None
    support_resources: Union[str, List[Any], None] = None
    depends_on: Optional[List[Any]] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[Dict[str, Any]] = None
