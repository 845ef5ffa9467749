"""
Project template schemas.

A template is a tree: areas hold responsibilities, responsibilities hold
tasks. Team members are matched to users (or created) on expansion.
"""
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from planner.schemas.base import CamelModel
from planner.schemas.project import ProjectType


class TemplateTeamMember(CamelModel):
    name: str
    email: Optional[str] = None
    handle: Optional[str] = None
    wallet: Optional[str] = None


class TemplateTask(CamelModel):
    title: str
    description: Optional[str] = None
    notes: Optional[str] = None
    estado: Optional[str] = None  # 'Not Started', 'In Progress', 'Done'
    etapa: Optional[str] = None  # timing bucket, e.g. '< 2 semanas'
    support_resources: Optional[List[str]] = None


class TemplateResponsibility(CamelModel):
    name: str
    description: Optional[str] = None
    tasks: List[TemplateTask] = []


class TemplateArea(CamelModel):
    name: str
    description: Optional[str] = None
    team: Optional[List[TemplateTeamMember]] = None
    responsibilities: List[TemplateResponsibility] = []
    sections: Optional[List[str]] = None


class ProjectTemplateCreate(CamelModel):
    name: str
    project_type: ProjectType = "Custom"
    description: Optional[str] = None
    areas: List[TemplateArea] = []


class ProjectTemplateUpdate(CamelModel):
    description: Optional[str] = None
    areas: Optional[List[TemplateArea]] = None


class ProjectTemplateResponse(CamelModel):
    id: UUID
    name: str
    project_type: str
    description: Optional[str] = None
    areas: List[TemplateArea] = []
    created_at: datetime
    updated_at: datetime


class TemplateRequest(CamelModel):
    """Body of ``POST /api/templates``; validated into ``ProjectTemplateCreate``."""

    name: Optional[str] = None
    project_type: Optional[str] = None
    description: Optional[str] = None
    areas: Optional[List[Any]] = None
