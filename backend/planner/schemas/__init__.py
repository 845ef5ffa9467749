"""
Pydantic schemas for API request/response validation and storage records.
"""
from planner.schemas.user import (
    UserCreate,
    UserRequest,
    UserResponse,
)
from planner.schemas.project import (
    PROJECT_STATUSES,
    PROJECT_TYPES,
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectMembershipResponse,
    ProjectRequest,
)
from planner.schemas.area import (
    AreaCreate,
    AreaUpdate,
    AreaOrder,
    AreaOrderItem,
    AreaReorderRequest,
    AreaRequest,
    AreaResponse,
    ResponsibilityCreate,
    ResponsibilityResponse,
)
from planner.schemas.task import (
    TASK_STATUSES,
    Recurrence,
    TaskCreate,
    TaskUpdate,
    TaskRequest,
    TaskResponse,
)
from planner.schemas.meeting import (
    MeetingCreate,
    MeetingUpdate,
    MeetingResponse,
    MeetingNoteCreate,
    MeetingNoteUpdate,
    MeetingNoteResponse,
    MeetingRequest,
    MeetingNoteRequest,
)
from planner.schemas.template import (
    TemplateTeamMember,
    TemplateTask,
    TemplateResponsibility,
    TemplateArea,
    ProjectTemplateCreate,
    ProjectTemplateUpdate,
    ProjectTemplateResponse,
    TemplateRequest,
)
from planner.schemas.overview import (
    TaskStats,
    AreaSummary,
    MeetingSummary,
    ProjectOverviewResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserRequest",
    "UserResponse",
    # Project
    "PROJECT_STATUSES",
    "PROJECT_TYPES",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectMembershipResponse",
    "ProjectRequest",
    # Area
    "AreaCreate",
    "AreaUpdate",
    "AreaOrder",
    "AreaOrderItem",
    "AreaReorderRequest",
    "AreaRequest",
    "AreaResponse",
    "ResponsibilityCreate",
    "ResponsibilityResponse",
    # Task
    "TASK_STATUSES",
    "Recurrence",
    "TaskCreate",
    "TaskUpdate",
    "TaskRequest",
    "TaskResponse",
    # Meeting
    "MeetingCreate",
    "MeetingUpdate",
    "MeetingResponse",
    "MeetingNoteCreate",
    "MeetingNoteUpdate",
    "MeetingNoteResponse",
    "MeetingRequest",
    "MeetingNoteRequest",
    # Template
    "TemplateTeamMember",
    "TemplateTask",
    "TemplateResponsibility",
    "TemplateArea",
    "ProjectTemplateCreate",
    "ProjectTemplateUpdate",
    "ProjectTemplateResponse",
    "TemplateRequest",
    # Overview
    "TaskStats",
    "AreaSummary",
    "MeetingSummary",
    "ProjectOverviewResponse",
]
