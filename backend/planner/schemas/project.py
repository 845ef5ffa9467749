"""
Project schemas.
"""
from datetime import date, datetime
from typing import Any, List, Literal, Optional
from uuid import UUID

from planner.schemas.base import CamelModel

ProjectType = Literal["Meetup", "Conference", "Property", "Custom"]
ProjectStatus = Literal["In Planning", "Active", "Completed", "Cancelled"]

PROJECT_TYPES = ("Meetup", "Conference", "Property", "Custom")
PROJECT_STATUSES = ("In Planning", "Active", "Completed", "Cancelled")


class ProjectCreate(CamelModel):
    name: str
    type: ProjectType = "Custom"
    status: ProjectStatus = "In Planning"
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    slug: Optional[str] = None
    participant_ids: List[UUID] = []


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[ProjectType] = None
    status: Optional[ProjectStatus] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    participant_ids: Optional[List[UUID]] = None


class ProjectResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    type: str
    status: str = "In Planning"
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    participant_ids: List[UUID] = []
    created_at: datetime
    updated_at: datetime


class ProjectMembershipResponse(CamelModel):
    success: bool = True
    project: ProjectResponse


class ProjectRequest(CamelModel):
    """
    Body of project create and update requests.

    Values stay loosely typed here; the router checks them field by field.
    """

    name: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    slug: Optional[str] = None
    participant_ids: Optional[List[Any]] = None
    template_id: Optional[str] = None
