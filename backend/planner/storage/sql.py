"""
Relational storage backend built on the async SQLAlchemy session.

Each write method runs in a single transaction: the primary row and its
junction rows are committed together. Junction sets are reconciled by diff
so unchanged participant/attendee/dependency rows are never rewritten.
"""
import logging
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from planner.models import (
    Area,
    AreaParticipant,
    Meeting,
    MeetingAttendee,
    MeetingNote,
    Project,
    ProjectParticipant,
    ProjectTemplate,
    Responsibility,
    Task,
    TaskDependency,
    User,
)
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
    Recurrence,
    ResponsibilityCreate,
    ResponsibilityResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    UserCreate,
    UserResponse,
)
from planner.services.slugs import generate_slug, make_unique_slug
from planner.storage.base import Storage, completion_timestamp, unique_ids

logger = logging.getLogger(__name__)


def _sync_links(links: list, wanted: List[UUID], key: str, factory: Callable) -> None:
    """Reconcile a junction collection with ``wanted`` ids in place."""
    wanted = unique_ids(wanted)
    current = {getattr(link, key): link for link in links}
    for linked_id, link in current.items():
        if linked_id not in wanted:
            links.remove(link)
    for linked_id in wanted:
        if linked_id not in current:
            links.append(factory(linked_id))


def _recurrence_json(recurrence: Optional[Recurrence]) -> Optional[dict]:
    if recurrence is None:
        return None
    return recurrence.model_dump(mode="json", by_alias=True, exclude_none=True)


def _template_record(template: ProjectTemplate) -> ProjectTemplateResponse:
    return ProjectTemplateResponse(
        id=template.id,
        name=template.name,
        project_type=template.project_type,
        description=template.description,
        areas=(template.template_data or {}).get("areas", []),
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def _template_areas_json(areas) -> dict:
    return {
        "areas": [
            area.model_dump(mode="json", by_alias=True, exclude_none=True) for area in areas
        ]
    }


class SqlStorage(Storage):
    """Storage over one ``AsyncSession`` (one request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, model, entity_id: UUID):
        result = await self.db.execute(
            select(model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # Users

    async def list_users(self) -> List[UserResponse]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def get_user(self, user_id: UUID) -> Optional[UserResponse]:
        user = await self.db.get(User, user_id)
        return UserResponse.model_validate(user) if user else None

    async def find_user_by_email(self, email: str) -> Optional[UserResponse]:
        result = await self.db.execute(select(User).where(User.email == email).limit(1))
        user = result.scalar_one_or_none()
        return UserResponse.model_validate(user) if user else None

    async def find_user_by_name(self, name: str) -> Optional[UserResponse]:
        result = await self.db.execute(
            select(User).where(func.lower(User.name) == name.lower()).limit(1)
        )
        user = result.scalar_one_or_none()
        return UserResponse.model_validate(user) if user else None

    async def create_user(self, data: UserCreate) -> UserResponse:
        user = User(**data.model_dump())
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return UserResponse.model_validate(user)

    # Projects

    async def _slug_taken(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        query = select(Project.id).where(Project.slug == slug)
        if exclude_id is not None:
            query = query.where(Project.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_projects(self) -> List[ProjectResponse]:
        result = await self.db.execute(select(Project).order_by(Project.created_at.desc()))
        return [ProjectResponse.model_validate(p) for p in result.scalars().all()]

    async def get_project(self, project_id: UUID) -> Optional[ProjectResponse]:
        project = await self._fetch(Project, project_id)
        return ProjectResponse.model_validate(project) if project else None

    async def get_project_by_slug(self, slug: str) -> Optional[ProjectResponse]:
        result = await self.db.execute(select(Project).where(Project.slug == slug))
        project = result.scalar_one_or_none()
        return ProjectResponse.model_validate(project) if project else None

    async def create_project(self, data: ProjectCreate) -> ProjectResponse:
        slug = await make_unique_slug(
            data.slug or generate_slug(data.name), self._slug_taken
        )
        project = Project(
            name=data.name,
            slug=slug,
            type=data.type,
            status=data.status,
            description=data.description,
            start_date=data.start_date,
            end_date=data.end_date,
        )
        project.participants = [
            ProjectParticipant(user_id=user_id) for user_id in unique_ids(data.participant_ids)
        ]
        self.db.add(project)
        await self.db.commit()
        logger.debug("Created project %s (%s)", project.id, slug)
        return await self.get_project(project.id)

    async def update_project(
        self, project_id: UUID, data: ProjectUpdate
    ) -> Optional[ProjectResponse]:
        project = await self._fetch(Project, project_id)
        if not project:
            return None

        update_data = data.model_dump(exclude_unset=True)
        participant_ids = update_data.pop("participant_ids", None)

        if update_data.get("name") and update_data["name"] != project.name:
            project.slug = await make_unique_slug(
                generate_slug(update_data["name"]),
                lambda slug: self._slug_taken(slug, exclude_id=project_id),
            )

        for field, value in update_data.items():
            setattr(project, field, value)

        if participant_ids is not None:
            _sync_links(
                project.participants,
                participant_ids,
                "user_id",
                lambda user_id: ProjectParticipant(user_id=user_id),
            )

        await self.db.commit()
        return await self.get_project(project_id)

    async def join_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]:
        project = await self._fetch(Project, project_id)
        if not project:
            return None
        if user_id not in project.participant_ids:
            project.participants.append(ProjectParticipant(user_id=user_id))
            await self.db.commit()
        return await self.get_project(project_id)

    async def leave_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]:
        project = await self._fetch(Project, project_id)
        if not project:
            return None
        for link in list(project.participants):
            if link.user_id == user_id:
                project.participants.remove(link)
        await self.db.commit()
        return await self.get_project(project_id)

    async def list_user_projects(self, user_id: UUID) -> List[ProjectResponse]:
        result = await self.db.execute(
            select(Project)
            .join(ProjectParticipant, ProjectParticipant.project_id == Project.id)
            .where(ProjectParticipant.user_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return [ProjectResponse.model_validate(p) for p in result.scalars().all()]

    async def is_user_joined(self, project_id: UUID, user_id: UUID) -> bool:
        result = await self.db.execute(
            select(ProjectParticipant.user_id).where(
                ProjectParticipant.project_id == project_id,
                ProjectParticipant.user_id == user_id,
            )
        )
        return result.scalar_one_or_none() is not None

    # Areas

    async def list_areas(self, project_id: Optional[UUID] = None) -> List[AreaResponse]:
        query = select(Area)
        if project_id:
            query = query.where(Area.project_id == project_id)
        query = query.order_by(Area.display_order, Area.created_at)

        result = await self.db.execute(query)
        return [AreaResponse.model_validate(a) for a in result.scalars().all()]

    async def get_area(self, area_id: UUID) -> Optional[AreaResponse]:
        area = await self._fetch(Area, area_id)
        return AreaResponse.model_validate(area) if area else None

    async def create_area(self, data: AreaCreate) -> AreaResponse:
        order = data.order
        if order is None:
            result = await self.db.execute(
                select(func.max(Area.display_order)).where(Area.project_id == data.project_id)
            )
            order = (result.scalar() or 0) + 1

        area = Area(
            project_id=data.project_id,
            name=data.name,
            description=data.description,
            lead_id=data.lead_id,
            display_order=order,
        )
        area.participants = [
            AreaParticipant(user_id=user_id) for user_id in unique_ids(data.participant_ids)
        ]
        self.db.add(area)
        await self.db.commit()
        return await self.get_area(area.id)

    async def update_area(self, area_id: UUID, data: AreaUpdate) -> Optional[AreaResponse]:
        area = await self._fetch(Area, area_id)
        if not area:
            return None

        update_data = data.model_dump(exclude_unset=True)
        participant_ids = update_data.pop("participant_ids", None)
        if "order" in update_data:
            update_data["display_order"] = update_data.pop("order")

        for field, value in update_data.items():
            setattr(area, field, value)

        if participant_ids is not None:
            _sync_links(
                area.participants,
                participant_ids,
                "user_id",
                lambda user_id: AreaParticipant(user_id=user_id),
            )

        await self.db.commit()
        return await self.get_area(area_id)

    async def delete_area(self, area_id: UUID) -> bool:
        area = await self._fetch(Area, area_id)
        if not area:
            return False
        await self.db.execute(delete(Responsibility).where(Responsibility.area_id == area_id))
        await self.db.delete(area)
        await self.db.commit()
        return True

    async def reorder_areas(self, project_id: UUID, orders: List[AreaOrder]) -> bool:
        for item in orders:
            await self.db.execute(
                update(Area)
                .where(Area.id == item.id, Area.project_id == project_id)
                .values(display_order=item.order)
            )
        await self.db.commit()
        return True

    # Responsibilities

    async def list_responsibilities(
        self, area_id: Optional[UUID] = None
    ) -> List[ResponsibilityResponse]:
        query = select(Responsibility)
        if area_id:
            query = query.where(Responsibility.area_id == area_id)
        query = query.order_by(Responsibility.created_at)

        result = await self.db.execute(query)
        return [ResponsibilityResponse.model_validate(r) for r in result.scalars().all()]

    async def create_responsibility(self, data: ResponsibilityCreate) -> ResponsibilityResponse:
        responsibility = Responsibility(**data.model_dump())
        self.db.add(responsibility)
        await self.db.commit()
        await self.db.refresh(responsibility)
        return ResponsibilityResponse.model_validate(responsibility)

    # Tasks

    async def list_tasks(
        self,
        project_id: Optional[UUID] = None,
        area_id: Optional[UUID] = None,
    ) -> List[TaskResponse]:
        query = select(Task)
        if project_id:
            query = query.where(Task.project_id == project_id)
        if area_id:
            query = query.where(Task.area_id == area_id)
        query = query.order_by(Task.created_at.desc())

        result = await self.db.execute(query)
        return [TaskResponse.model_validate(t) for t in result.scalars().all()]

    async def get_task(self, task_id: UUID) -> Optional[TaskResponse]:
        task = await self._fetch(Task, task_id)
        return TaskResponse.model_validate(task) if task else None

    async def create_task(self, data: TaskCreate) -> TaskResponse:
        task = Task(
            project_id=data.project_id,
            area_id=data.area_id,
            responsibility_id=data.responsibility_id,
            title=data.title,
            description=data.description,
            assignee_id=data.assignee_id,
            deadline=data.deadline,
            status=data.status,
            support_resources=data.support_resources,
            template_id=data.template_id,
            is_recurring=data.is_recurring,
            recurrence=_recurrence_json(data.recurrence),
            completed_at=completion_timestamp(data.status),
        )
        task.dependencies = [
            TaskDependency(depends_on_task_id=dep_id) for dep_id in unique_ids(data.depends_on)
        ]
        self.db.add(task)
        await self.db.commit()
        return await self.get_task(task.id)

    async def update_task(self, task_id: UUID, data: TaskUpdate) -> Optional[TaskResponse]:
        task = await self._fetch(Task, task_id)
        if not task:
            return None

        update_data = data.model_dump(exclude_unset=True)
        depends_on = update_data.pop("depends_on", None)
        if "recurrence" in update_data:
            update_data["recurrence"] = _recurrence_json(data.recurrence)
        if "status" in update_data:
            task.completed_at = completion_timestamp(
                update_data["status"], task.status, task.completed_at
            )

        for field, value in update_data.items():
            setattr(task, field, value)

        if depends_on is not None:
            _sync_links(
                task.dependencies,
                depends_on,
                "depends_on_task_id",
                lambda dep_id: TaskDependency(depends_on_task_id=dep_id),
            )

        await self.db.commit()
        return await self.get_task(task_id)

    async def delete_task(self, task_id: UUID) -> bool:
        task = await self._fetch(Task, task_id)
        if not task:
            return False
        await self.db.delete(task)
        await self.db.commit()
        return True

    # Meetings

    async def list_meetings(self, project_id: Optional[UUID] = None) -> List[MeetingResponse]:
        query = select(Meeting)
        if project_id:
            query = query.where(Meeting.project_id == project_id)
        query = query.order_by(Meeting.date.desc(), Meeting.time.desc())

        result = await self.db.execute(query)
        return [MeetingResponse.model_validate(m) for m in result.scalars().all()]

    async def get_meeting(self, meeting_id: UUID) -> Optional[MeetingResponse]:
        meeting = await self._fetch(Meeting, meeting_id)
        return MeetingResponse.model_validate(meeting) if meeting else None

    async def create_meeting(self, data: MeetingCreate) -> MeetingResponse:
        meeting = Meeting(
            project_id=data.project_id,
            title=data.title,
            date=data.date,
            time=data.time,
        )
        meeting.attendees = [
            MeetingAttendee(user_id=user_id) for user_id in unique_ids(data.attendee_ids)
        ]
        self.db.add(meeting)
        await self.db.commit()
        return await self.get_meeting(meeting.id)

    async def update_meeting(
        self, meeting_id: UUID, data: MeetingUpdate
    ) -> Optional[MeetingResponse]:
        meeting = await self._fetch(Meeting, meeting_id)
        if not meeting:
            return None

        update_data = data.model_dump(exclude_unset=True)
        attendee_ids = update_data.pop("attendee_ids", None)

        for field, value in update_data.items():
            setattr(meeting, field, value)

        if attendee_ids is not None:
            _sync_links(
                meeting.attendees,
                attendee_ids,
                "user_id",
                lambda user_id: MeetingAttendee(user_id=user_id),
            )

        await self.db.commit()
        return await self.get_meeting(meeting_id)

    async def delete_meeting(self, meeting_id: UUID) -> bool:
        meeting = await self._fetch(Meeting, meeting_id)
        if not meeting:
            return False
        await self.db.execute(delete(MeetingNote).where(MeetingNote.meeting_id == meeting_id))
        await self.db.delete(meeting)
        await self.db.commit()
        return True

    # Meeting notes

    async def get_meeting_note(self, note_id: UUID) -> Optional[MeetingNoteResponse]:
        note = await self._fetch(MeetingNote, note_id)
        return MeetingNoteResponse.model_validate(note) if note else None

    async def get_note_for_meeting(self, meeting_id: UUID) -> Optional[MeetingNoteResponse]:
        result = await self.db.execute(
            select(MeetingNote).where(MeetingNote.meeting_id == meeting_id)
        )
        note = result.scalar_one_or_none()
        return MeetingNoteResponse.model_validate(note) if note else None

    async def create_meeting_note(self, data: MeetingNoteCreate) -> MeetingNoteResponse:
        note = MeetingNote(**data.model_dump())
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return MeetingNoteResponse.model_validate(note)

    async def update_meeting_note(
        self, note_id: UUID, data: MeetingNoteUpdate
    ) -> Optional[MeetingNoteResponse]:
        note = await self._fetch(MeetingNote, note_id)
        if not note:
            return None

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(note, field, value)

        await self.db.commit()
        await self.db.refresh(note)
        return MeetingNoteResponse.model_validate(note)

    # Templates

    async def list_templates(self) -> List[ProjectTemplateResponse]:
        result = await self.db.execute(
            select(ProjectTemplate).order_by(ProjectTemplate.created_at)
        )
        return [_template_record(t) for t in result.scalars().all()]

    async def get_template(self, template_id: UUID) -> Optional[ProjectTemplateResponse]:
        template = await self._fetch(ProjectTemplate, template_id)
        return _template_record(template) if template else None

    async def get_template_by_name(self, name: str) -> Optional[ProjectTemplateResponse]:
        result = await self.db.execute(
            select(ProjectTemplate).where(ProjectTemplate.name == name)
        )
        template = result.scalar_one_or_none()
        return _template_record(template) if template else None

    async def create_template(self, data: ProjectTemplateCreate) -> ProjectTemplateResponse:
        template = ProjectTemplate(
            name=data.name,
            project_type=data.project_type,
            description=data.description,
            template_data=_template_areas_json(data.areas),
        )
        self.db.add(template)
        await self.db.commit()
        await self.db.refresh(template)
        return _template_record(template)

    async def update_template(
        self, template_id: UUID, data: ProjectTemplateUpdate
    ) -> Optional[ProjectTemplateResponse]:
        template = await self._fetch(ProjectTemplate, template_id)
        if not template:
            return None

        update_data = data.model_dump(exclude_unset=True)
        if "description" in update_data:
            template.description = update_data["description"]
        if data.areas is not None:
            template.template_data = _template_areas_json(data.areas)

        await self.db.commit()
        await self.db.refresh(template)
        return _template_record(template)
