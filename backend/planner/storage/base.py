"""
Storage contract shared by the relational and flat-file backends.

Every method returns pydantic records from ``planner.schemas``; lookups by id
return ``None`` when the entity does not exist. Update methods apply only the
fields that were explicitly set on the update schema.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from planner.database import utc_now
from planner.schemas import (
    AreaCreate,
    AreaOrder,
    AreaResponse,
    AreaUpdate,
    MeetingCreate,
    MeetingNoteCreate,
    MeetingNoteResponse,
    MeetingNoteUpdate,
    MeetingResponse,
    MeetingUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectTemplateCreate,
    ProjectTemplateResponse,
    ProjectTemplateUpdate,
    ProjectUpdate,
    ResponsibilityCreate,
    ResponsibilityResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    UserCreate,
    UserResponse,
)


def completion_timestamp(
    new_status: str,
    previous_status: Optional[str] = None,
    previous_completed_at: Optional[datetime] = None,
) -> Optional[datetime]:
    """completedAt for a task moving to ``new_status``."""
    if new_status != "completed":
        return None
    if previous_status == "completed" and previous_completed_at is not None:
        return previous_completed_at
    return utc_now()


def unique_ids(ids: List[UUID]) -> List[UUID]:
    """Drop duplicates, keep first-seen order."""
    return list(dict.fromkeys(ids))


class Storage(ABC):
    """Persistence operations for the planner domain."""

    # Users

    @abstractmethod
    async def list_users(self) -> List[UserResponse]: ...

    @abstractmethod
    async def get_user(self, user_id: UUID) -> Optional[UserResponse]: ...

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[UserResponse]: ...

    @abstractmethod
    async def find_user_by_name(self, name: str) -> Optional[UserResponse]:
        """Exact, case-insensitive name match."""

    @abstractmethod
    async def create_user(self, data: UserCreate) -> UserResponse: ...

    # Projects

    @abstractmethod
    async def list_projects(self) -> List[ProjectResponse]: ...

    @abstractmethod
    async def get_project(self, project_id: UUID) -> Optional[ProjectResponse]: ...

    @abstractmethod
    async def get_project_by_slug(self, slug: str) -> Optional[ProjectResponse]: ...

    @abstractmethod
    async def create_project(self, data: ProjectCreate) -> ProjectResponse:
        """Insert a project under a unique slug derived from its name."""

    @abstractmethod
    async def update_project(
        self, project_id: UUID, data: ProjectUpdate
    ) -> Optional[ProjectResponse]:
        """Partial update. A new name regenerates the slug."""

    @abstractmethod
    async def join_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]: ...

    @abstractmethod
    async def leave_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]: ...

    @abstractmethod
    async def list_user_projects(self, user_id: UUID) -> List[ProjectResponse]: ...

    @abstractmethod
    async def is_user_joined(self, project_id: UUID, user_id: UUID) -> bool: ...

    # Areas

    @abstractmethod
    async def list_areas(self, project_id: Optional[UUID] = None) -> List[AreaResponse]: ...

    @abstractmethod
    async def get_area(self, area_id: UUID) -> Optional[AreaResponse]: ...

    @abstractmethod
    async def create_area(self, data: AreaCreate) -> AreaResponse:
        """Insert an area; without an explicit order it goes last in its project."""

    @abstractmethod
    async def update_area(self, area_id: UUID, data: AreaUpdate) -> Optional[AreaResponse]: ...

    @abstractmethod
    async def delete_area(self, area_id: UUID) -> bool:
        """Remove an area and its responsibilities. Tasks are left untouched."""

    @abstractmethod
    async def reorder_areas(self, project_id: UUID, orders: List[AreaOrder]) -> bool:
        """Write every submitted order for areas of ``project_id`` in one go."""

    # Responsibilities

    @abstractmethod
    async def list_responsibilities(
        self, area_id: Optional[UUID] = None
    ) -> List[ResponsibilityResponse]: ...

    @abstractmethod
    async def create_responsibility(self, data: ResponsibilityCreate) -> ResponsibilityResponse: ...

    # Tasks

    @abstractmethod
    async def list_tasks(
        self,
        project_id: Optional[UUID] = None,
        area_id: Optional[UUID] = None,
    ) -> List[TaskResponse]: ...

    @abstractmethod
    async def get_task(self, task_id: UUID) -> Optional[TaskResponse]: ...

    @abstractmethod
    async def create_task(self, data: TaskCreate) -> TaskResponse: ...

    @abstractmethod
    async def update_task(self, task_id: UUID, data: TaskUpdate) -> Optional[TaskResponse]: ...

    @abstractmethod
    async def delete_task(self, task_id: UUID) -> bool: ...

    # Meetings

    @abstractmethod
    async def list_meetings(self, project_id: Optional[UUID] = None) -> List[MeetingResponse]: ...

    @abstractmethod
    async def get_meeting(self, meeting_id: UUID) -> Optional[MeetingResponse]: ...

    @abstractmethod
    async def create_meeting(self, data: MeetingCreate) -> MeetingResponse: ...

    @abstractmethod
    async def update_meeting(
        self, meeting_id: UUID, data: MeetingUpdate
    ) -> Optional[MeetingResponse]: ...

    @abstractmethod
    async def delete_meeting(self, meeting_id: UUID) -> bool:
        """Remove a meeting together with its attendees and note."""

    # Meeting notes

    @abstractmethod
    async def get_meeting_note(self, note_id: UUID) -> Optional[MeetingNoteResponse]: ...

    @abstractmethod
    async def get_note_for_meeting(self, meeting_id: UUID) -> Optional[MeetingNoteResponse]: ...

    @abstractmethod
    async def create_meeting_note(self, data: MeetingNoteCreate) -> MeetingNoteResponse: ...

    @abstractmethod
    async def update_meeting_note(
        self, note_id: UUID, data: MeetingNoteUpdate
    ) -> Optional[MeetingNoteResponse]: ...

    # Templates

    @abstractmethod
    async def list_templates(self) -> List[ProjectTemplateResponse]: ...

    @abstractmethod
    async def get_template(self, template_id: UUID) -> Optional[ProjectTemplateResponse]: ...

    @abstractmethod
    async def get_template_by_name(self, name: str) -> Optional[ProjectTemplateResponse]: ...

    @abstractmethod
    async def create_template(self, data: ProjectTemplateCreate) -> ProjectTemplateResponse: ...

    @abstractmethod
    async def update_template(
        self, template_id: UUID, data: ProjectTemplateUpdate
    ) -> Optional[ProjectTemplateResponse]: ...
