"""
Flat-file storage backend: one JSON array file per entity type.

Used for deployments without a database. Relations are stored inline as id
arrays (participantIds, attendeeIds, dependsOn). Read-modify-write cycles are
serialized per data directory and files are replaced atomically.
"""
import asyncio
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type, TypeVar
from uuid import UUID

import aiofiles
from pydantic import BaseModel

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
from planner.services.slugs import generate_slug, make_unique_slug
from planner.storage.base import Storage, completion_timestamp, unique_ids

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

USERS_FILE = "users.json"
PROJECTS_FILE = "projects.json"
AREAS_FILE = "areas.json"
RESPONSIBILITIES_FILE = "responsibilities.json"
TASKS_FILE = "tasks.json"
MEETINGS_FILE = "meetings.json"
MEETING_NOTES_FILE = "meeting-notes.json"
TEMPLATES_FILE = "templates.json"

_directory_locks: Dict[str, asyncio.Lock] = {}


def _lock_for(directory: Path) -> asyncio.Lock:
    key = str(directory.resolve())
    if key not in _directory_locks:
        _directory_locks[key] = asyncio.Lock()
    return _directory_locks[key]


class JsonFileStorage(Storage):
    """Storage over a directory of JSON files."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self._lock = _lock_for(self.data_dir)

    # File access

    async def _read(self, filename: str, model: Type[RecordT]) -> List[RecordT]:
        path = self.data_dir / filename
        if not path.exists():
            return []

        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()

        if not content.strip():
            return []
        return [model.model_validate(row) for row in json.loads(content)]

    async def _write(self, filename: str, records: List[BaseModel]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.data_dir / filename
        tmp_path = path.with_name(path.name + ".tmp")

        rows = [r.model_dump(mode="json", by_alias=True) for r in records]
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(rows, indent=2, ensure_ascii=False))
        os.replace(tmp_path, path)

    async def _find(
        self, filename: str, model: Type[RecordT], predicate: Callable[[RecordT], bool]
    ) -> Optional[RecordT]:
        for record in await self._read(filename, model):
            if predicate(record):
                return record
        return None

    async def _replace(self, filename: str, model: Type[RecordT], record_id: UUID, apply):
        """Load, patch one record with ``apply(record) -> record``, save. Caller holds the lock."""
        records = await self._read(filename, model)
        for index, record in enumerate(records):
            if record.id == record_id:
                updated = apply(record)
                records[index] = updated.model_copy(update={"updated_at": utc_now()})
                await self._write(filename, records)
                return records[index]
        return None

    async def _remove(self, filename: str, model: Type[BaseModel], predicate) -> int:
        """Drop matching records. Caller holds the lock."""
        records = await self._read(filename, model)
        kept = [r for r in records if not predicate(r)]
        if len(kept) != len(records):
            await self._write(filename, kept)
        return len(records) - len(kept)

    async def _append(self, filename: str, model: Type[BaseModel], record: BaseModel) -> None:
        records = await self._read(filename, model)
        records.append(record)
        await self._write(filename, records)

    @staticmethod
    def _stamps() -> dict:
        now = utc_now()
        return {"id": uuid.uuid4(), "created_at": now, "updated_at": now}

    # Users

    async def list_users(self) -> List[UserResponse]:
        users = await self._read(USERS_FILE, UserResponse)
        return sorted(users, key=lambda u: u.created_at)

    async def get_user(self, user_id: UUID) -> Optional[UserResponse]:
        return await self._find(USERS_FILE, UserResponse, lambda u: u.id == user_id)

    async def find_user_by_email(self, email: str) -> Optional[UserResponse]:
        return await self._find(USERS_FILE, UserResponse, lambda u: u.email == email)

    async def find_user_by_name(self, name: str) -> Optional[UserResponse]:
        wanted = name.lower()
        return await self._find(USERS_FILE, UserResponse, lambda u: u.name.lower() == wanted)

    async def create_user(self, data: UserCreate) -> UserResponse:
        user = UserResponse(**data.model_dump(), **self._stamps())
        async with self._lock:
            await self._append(USERS_FILE, UserResponse, user)
        return user

    # Projects

    async def list_projects(self) -> List[ProjectResponse]:
        projects = await self._read(PROJECTS_FILE, ProjectResponse)
        return sorted(projects, key=lambda p: p.created_at, reverse=True)

    async def get_project(self, project_id: UUID) -> Optional[ProjectResponse]:
        return await self._find(PROJECTS_FILE, ProjectResponse, lambda p: p.id == project_id)

    async def get_project_by_slug(self, slug: str) -> Optional[ProjectResponse]:
        return await self._find(PROJECTS_FILE, ProjectResponse, lambda p: p.slug == slug)

    async def create_project(self, data: ProjectCreate) -> ProjectResponse:
        async with self._lock:
            projects = await self._read(PROJECTS_FILE, ProjectResponse)
            taken = {p.slug for p in projects}

            async def is_taken(slug: str) -> bool:
                return slug in taken

            fields = data.model_dump(exclude={"slug", "participant_ids"})
            project = ProjectResponse(
                **fields,
                slug=await make_unique_slug(data.slug or generate_slug(data.name), is_taken),
                participant_ids=unique_ids(data.participant_ids),
                **self._stamps(),
            )
            projects.append(project)
            await self._write(PROJECTS_FILE, projects)
        logger.debug("Created project %s (%s)", project.id, project.slug)
        return project

    async def update_project(
        self, project_id: UUID, data: ProjectUpdate
    ) -> Optional[ProjectResponse]:
        async with self._lock:
            projects = await self._read(PROJECTS_FILE, ProjectResponse)
            current = next((p for p in projects if p.id == project_id), None)
            if not current:
                return None

            update_data = data.model_dump(exclude_unset=True)
            if "participant_ids" in update_data:
                update_data["participant_ids"] = unique_ids(update_data["participant_ids"] or [])

            if update_data.get("name") and update_data["name"] != current.name:
                taken = {p.slug for p in projects if p.id != project_id}

                async def is_taken(slug: str) -> bool:
                    return slug in taken

                update_data["slug"] = await make_unique_slug(
                    generate_slug(update_data["name"]), is_taken
                )

            return await self._replace(
                PROJECTS_FILE,
                ProjectResponse,
                project_id,
                lambda p: p.model_copy(update=update_data),
            )

    async def _set_membership(self, project_id: UUID, user_id: UUID, joined: bool):
        def apply(project: ProjectResponse) -> ProjectResponse:
            ids = [i for i in project.participant_ids if i != user_id]
            if joined:
                ids = project.participant_ids if user_id in project.participant_ids else ids + [user_id]
            return project.model_copy(update={"participant_ids": ids})

        async with self._lock:
            return await self._replace(PROJECTS_FILE, ProjectResponse, project_id, apply)

    async def join_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]:
        return await self._set_membership(project_id, user_id, joined=True)

    async def leave_project(self, project_id: UUID, user_id: UUID) -> Optional[ProjectResponse]:
        return await self._set_membership(project_id, user_id, joined=False)

    async def list_user_projects(self, user_id: UUID) -> List[ProjectResponse]:
        return [p for p in await self.list_projects() if user_id in p.participant_ids]

    async def is_user_joined(self, project_id: UUID, user_id: UUID) -> bool:
        project = await self.get_project(project_id)
        return bool(project and user_id in project.participant_ids)

    # Areas

    async def list_areas(self, project_id: Optional[UUID] = None) -> List[AreaResponse]:
        areas = await self._read(AREAS_FILE, AreaResponse)
        if project_id:
            areas = [a for a in areas if a.project_id == project_id]
        return sorted(areas, key=lambda a: (a.order, a.created_at))

    async def get_area(self, area_id: UUID) -> Optional[AreaResponse]:
        return await self._find(AREAS_FILE, AreaResponse, lambda a: a.id == area_id)

    async def create_area(self, data: AreaCreate) -> AreaResponse:
        async with self._lock:
            areas = await self._read(AREAS_FILE, AreaResponse)
            order = data.order
            if order is None:
                orders = [a.order for a in areas if a.project_id == data.project_id]
                order = max(orders, default=0) + 1

            fields = data.model_dump(exclude={"order", "participant_ids"})
            area = AreaResponse(
                **fields,
                order=order,
                participant_ids=unique_ids(data.participant_ids),
                **self._stamps(),
            )
            areas.append(area)
            await self._write(AREAS_FILE, areas)
        return area

    async def update_area(self, area_id: UUID, data: AreaUpdate) -> Optional[AreaResponse]:
        update_data = data.model_dump(exclude_unset=True)
        if "participant_ids" in update_data:
            update_data["participant_ids"] = unique_ids(update_data["participant_ids"] or [])
        if update_data.get("order", 0) is None:
            update_data.pop("order")

        async with self._lock:
            return await self._replace(
                AREAS_FILE, AreaResponse, area_id, lambda a: a.model_copy(update=update_data)
            )

    async def delete_area(self, area_id: UUID) -> bool:
        async with self._lock:
            removed = await self._remove(AREAS_FILE, AreaResponse, lambda a: a.id == area_id)
            if not removed:
                return False
            await self._remove(
                RESPONSIBILITIES_FILE, ResponsibilityResponse, lambda r: r.area_id == area_id
            )
        return True

    async def reorder_areas(self, project_id: UUID, orders: List[AreaOrder]) -> bool:
        new_orders = {item.id: item.order for item in orders}
        now = utc_now()
        async with self._lock:
            areas = await self._read(AREAS_FILE, AreaResponse)
            areas = [
                a.model_copy(update={"order": new_orders[a.id], "updated_at": now})
                if a.project_id == project_id and a.id in new_orders
                else a
                for a in areas
            ]
            await self._write(AREAS_FILE, areas)
        return True

    # Responsibilities

    async def list_responsibilities(
        self, area_id: Optional[UUID] = None
    ) -> List[ResponsibilityResponse]:
        responsibilities = await self._read(RESPONSIBILITIES_FILE, ResponsibilityResponse)
        if area_id:
            responsibilities = [r for r in responsibilities if r.area_id == area_id]
        return sorted(responsibilities, key=lambda r: r.created_at)

    async def create_responsibility(self, data: ResponsibilityCreate) -> ResponsibilityResponse:
        responsibility = ResponsibilityResponse(**data.model_dump(), **self._stamps())
        async with self._lock:
            await self._append(RESPONSIBILITIES_FILE, ResponsibilityResponse, responsibility)
        return responsibility

    # Tasks

    async def list_tasks(
        self,
        project_id: Optional[UUID] = None,
        area_id: Optional[UUID] = None,
    ) -> List[TaskResponse]:
        tasks = await self._read(TASKS_FILE, TaskResponse)
        if project_id:
            tasks = [t for t in tasks if t.project_id == project_id]
        if area_id:
            tasks = [t for t in tasks if t.area_id == area_id]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    async def get_task(self, task_id: UUID) -> Optional[TaskResponse]:
        return await self._find(TASKS_FILE, TaskResponse, lambda t: t.id == task_id)

    async def create_task(self, data: TaskCreate) -> TaskResponse:
        fields = data.model_dump(exclude={"depends_on", "recurrence"})
        task = TaskResponse(
            **fields,
            depends_on=unique_ids(data.depends_on),
            recurrence=data.recurrence,
            completed_at=completion_timestamp(data.status),
            **self._stamps(),
        )
        async with self._lock:
            await self._append(TASKS_FILE, TaskResponse, task)
        return task

    async def update_task(self, task_id: UUID, data: TaskUpdate) -> Optional[TaskResponse]:
        update_data = data.model_dump(exclude_unset=True)
        if "depends_on" in update_data:
            update_data["depends_on"] = unique_ids(update_data["depends_on"] or [])
        if "recurrence" in update_data:
            update_data["recurrence"] = data.recurrence

        def apply(task: TaskResponse) -> TaskResponse:
            changes = dict(update_data)
            if "status" in changes:
                changes["completed_at"] = completion_timestamp(
                    changes["status"], task.status, task.completed_at
                )
            return task.model_copy(update=changes)

        async with self._lock:
            return await self._replace(TASKS_FILE, TaskResponse, task_id, apply)

    async def delete_task(self, task_id: UUID) -> bool:
        async with self._lock:
            removed = await self._remove(TASKS_FILE, TaskResponse, lambda t: t.id == task_id)
        return removed > 0

    # Meetings

    async def list_meetings(self, project_id: Optional[UUID] = None) -> List[MeetingResponse]:
        meetings = await self._read(MEETINGS_FILE, MeetingResponse)
        if project_id:
            meetings = [m for m in meetings if m.project_id == project_id]
        return sorted(meetings, key=lambda m: (m.date, m.time), reverse=True)

    async def get_meeting(self, meeting_id: UUID) -> Optional[MeetingResponse]:
        return await self._find(MEETINGS_FILE, MeetingResponse, lambda m: m.id == meeting_id)

    async def create_meeting(self, data: MeetingCreate) -> MeetingResponse:
        fields = data.model_dump(exclude={"attendee_ids"})
        meeting = MeetingResponse(
            **fields,
            attendee_ids=unique_ids(data.attendee_ids),
            **self._stamps(),
        )
        async with self._lock:
            await self._append(MEETINGS_FILE, MeetingResponse, meeting)
        return meeting

    async def update_meeting(
        self, meeting_id: UUID, data: MeetingUpdate
    ) -> Optional[MeetingResponse]:
        update_data = data.model_dump(exclude_unset=True)
        if "attendee_ids" in update_data:
            update_data["attendee_ids"] = unique_ids(update_data["attendee_ids"] or [])

        async with self._lock:
            return await self._replace(
                MEETINGS_FILE,
                MeetingResponse,
                meeting_id,
                lambda m: m.model_copy(update=update_data),
            )

    async def delete_meeting(self, meeting_id: UUID) -> bool:
        async with self._lock:
            removed = await self._remove(
                MEETINGS_FILE, MeetingResponse, lambda m: m.id == meeting_id
            )
            if not removed:
                return False
            await self._remove(
                MEETING_NOTES_FILE, MeetingNoteResponse, lambda n: n.meeting_id == meeting_id
            )
        return True

    # Meeting notes

    async def get_meeting_note(self, note_id: UUID) -> Optional[MeetingNoteResponse]:
        return await self._find(
            MEETING_NOTES_FILE, MeetingNoteResponse, lambda n: n.id == note_id
        )

    async def get_note_for_meeting(self, meeting_id: UUID) -> Optional[MeetingNoteResponse]:
        return await self._find(
            MEETING_NOTES_FILE, MeetingNoteResponse, lambda n: n.meeting_id == meeting_id
        )

    async def create_meeting_note(self, data: MeetingNoteCreate) -> MeetingNoteResponse:
        note = MeetingNoteResponse(**data.model_dump(), **self._stamps())
        async with self._lock:
            await self._append(MEETING_NOTES_FILE, MeetingNoteResponse, note)
        return note

    async def update_meeting_note(
        self, note_id: UUID, data: MeetingNoteUpdate
    ) -> Optional[MeetingNoteResponse]:
        update_data = data.model_dump(exclude_unset=True)
        async with self._lock:
            return await self._replace(
                MEETING_NOTES_FILE,
                MeetingNoteResponse,
                note_id,
                lambda n: n.model_copy(update=update_data),
            )

    # Templates

    async def list_templates(self) -> List[ProjectTemplateResponse]:
        templates = await self._read(TEMPLATES_FILE, ProjectTemplateResponse)
        return sorted(templates, key=lambda t: t.created_at)

    async def get_template(self, template_id: UUID) -> Optional[ProjectTemplateResponse]:
        return await self._find(
            TEMPLATES_FILE, ProjectTemplateResponse, lambda t: t.id == template_id
        )

    async def get_template_by_name(self, name: str) -> Optional[ProjectTemplateResponse]:
        return await self._find(TEMPLATES_FILE, ProjectTemplateResponse, lambda t: t.name == name)

    async def create_template(self, data: ProjectTemplateCreate) -> ProjectTemplateResponse:
        template = ProjectTemplateResponse(
            name=data.name,
            project_type=data.project_type,
            description=data.description,
            areas=data.areas,
            **self._stamps(),
        )
        async with self._lock:
            await self._append(TEMPLATES_FILE, ProjectTemplateResponse, template)
        return template

    async def update_template(
        self, template_id: UUID, data: ProjectTemplateUpdate
    ) -> Optional[ProjectTemplateResponse]:
        changes = {}
        if "description" in data.model_fields_set:
            changes["description"] = data.description
        if data.areas is not None:
            changes["areas"] = data.areas

        async with self._lock:
            return await self._replace(
                TEMPLATES_FILE,
                ProjectTemplateResponse,
                template_id,
                lambda t: t.model_copy(update=changes),
            )
