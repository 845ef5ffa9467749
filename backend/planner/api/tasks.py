"""
Tasks endpoints.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from planner.api.areas import require_project_id
from planner.api.deps import get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_string,
    optional_uuid,
    parse_optional_date,
    parse_support_resources,
    parse_uuid_param,
    validate_required_string,
    validate_uuid_list,
)
from planner.schemas import (
    TASK_STATUSES,
    Recurrence,
    TaskCreate,
    TaskRequest,
    TaskResponse,
    TaskUpdate,
)
from planner.storage import Storage

router = APIRouter()


def _parse_status(value) -> str:
    if value not in TASK_STATUSES:
        raise bad_request("Invalid task status")
    return value


def _parse_recurrence(value) -> Optional[Recurrence]:
    if value is None:
        return None
    try:
        return Recurrence.model_validate(value)
    except ValidationError:
        raise bad_request("Invalid recurrence")


async def _check_area(storage: Storage, area_id: Optional[UUID], project_id: UUID) -> None:
    """An area given for a task must exist and belong to the task's project."""
    if area_id is None:
        return
    area = await storage.get_area(area_id)
    if not area or area.project_id != project_id:
        raise bad_request("Invalid areaId: area does not belong to this project")


@router.get("", response_model=List[TaskResponse], response_model_exclude_none=True)
async def list_tasks(
    projectId: Optional[str] = None,
    areaId: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """List tasks, optionally filtered by project and area."""
    return await storage.list_tasks(
        project_id=optional_uuid(projectId, "projectId"),
        area_id=optional_uuid(areaId, "areaId"),
    )


@router.post(
    "",
    response_model=TaskResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(task_data: TaskRequest, storage: Storage = Depends(get_storage)):
    """Create a task."""
    project_id = UUID(require_project_id(task_data.project_id))
    title = validate_required_string(task_data.title, "title")
    if not title:
        raise bad_request("Task title is required")

    area_id = optional_uuid(task_data.area_id, "areaId")
    await _check_area(storage, area_id, project_id)

    data = TaskCreate(
        project_id=project_id,
        area_id=area_id,
        responsibility_id=optional_uuid(task_data.responsibility_id, "responsibilityId"),
        title=title,
        description=optional_string(task_data.description),
        assignee_id=optional_uuid(task_data.assignee_id, "assigneeId"),
        deadline=parse_optional_date(task_data.deadline, "deadline"),
        status=_parse_status(task_data.status) if task_data.status else "pending",
        support_resources=parse_support_resources(task_data.support_resources),
        depends_on=validate_uuid_list(task_data.depends_on, "dependsOn"),
        is_recurring=task_data.is_recurring,
        recurrence=_parse_recurrence(task_data.recurrence),
    )

    try:
        return await storage.create_task(data)
    except Exception as exc:
        handle_api_error(exc, "creating task", "Failed to create task")


@router.get("/{task_id}", response_model=TaskResponse, response_model_exclude_none=True)
async def get_task(task_id: str, storage: Storage = Depends(get_storage)):
    """Get a task."""
    task = await storage.get_task(parse_uuid_param(task_id, "Task"))
    if not task:
        raise not_found("Task")
    return task


@router.put("/{task_id}", response_model=TaskResponse, response_model_exclude_none=True)
async def update_task(
    task_id: str,
    task_data: TaskRequest,
    storage: Storage = Depends(get_storage),
):
    """Update a task. Only the fields present in the body change."""
    task_uuid = parse_uuid_param(task_id, "Task")
    existing = await storage.get_task(task_uuid)
    if not existing:
        raise not_found("Task")

    sent = task_data.model_fields_set
    fields = {}

    project_id = existing.project_id
    if "project_id" in sent:
        project_id = UUID(require_project_id(task_data.project_id))
        fields["project_id"] = project_id

    if "title" in sent:
        title = validate_required_string(task_data.title, "title")
        if not title:
            raise bad_request("Task title is required")
        fields["title"] = title

    # A task may keep an area that was deleted; only a new pairing is checked
    area_id = existing.area_id
    if "area_id" in sent:
        area_id = optional_uuid(task_data.area_id, "areaId")
        fields["area_id"] = area_id
    if area_id != existing.area_id or project_id != existing.project_id:
        await _check_area(storage, area_id, project_id)

    if "description" in sent:
        fields["description"] = optional_string(task_data.description)
    if "assignee_id" in sent:
        fields["assignee_id"] = optional_uuid(task_data.assignee_id, "assigneeId")
    if "deadline" in sent:
        fields["deadline"] = parse_optional_date(task_data.deadline, "deadline")
    if task_data.status:
        fields["status"] = _parse_status(task_data.status)
    if "support_resources" in sent:
        fields["support_resources"] = parse_support_resources(task_data.support_resources)
    if "depends_on" in sent:
        fields["depends_on"] = validate_uuid_list(task_data.depends_on, "dependsOn")
    if "is_recurring" in sent:
        fields["is_recurring"] = task_data.is_recurring
    if "recurrence" in sent:
        fields["recurrence"] = _parse_recurrence(task_data.recurrence)

    try:
        task = await storage.update_task(task_uuid, TaskUpdate(**fields))
    except Exception as exc:
        handle_api_error(exc, "updating task", "Failed to update task")

    if not task:
        raise not_found("Task")
    return task


@router.delete("/{task_id}")
async def delete_task(task_id: str, storage: Storage = Depends(get_storage)):
    """Delete a task."""
    task_uuid = parse_uuid_param(task_id, "Task")
    if not await storage.get_task(task_uuid):
        raise not_found("Task")

    try:
        deleted = await storage.delete_task(task_uuid)
    except Exception as exc:
        handle_api_error(exc, "deleting task", "Failed to delete task")

    if not deleted:
        raise not_found("Task")
    return {"success": True}
