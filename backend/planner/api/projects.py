"""
Projects endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from planner.api.deps import get_current_user, get_storage, security
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_string,
    optional_uuid,
    parse_optional_date,
    parse_uuid_param,
    validate_required_string,
    validate_uuid_list,
)
from planner.schemas import (
    PROJECT_STATUSES,
    PROJECT_TYPES,
    ProjectCreate,
    ProjectMembershipResponse,
    ProjectOverviewResponse,
    ProjectRequest,
    ProjectResponse,
    ProjectUpdate,
    UserResponse,
)
from planner.services.overview import build_project_overview
from planner.services.slugs import generate_slug
from planner.services.templates import (
    ensure_template,
    initialize_project_from_template,
    load_templates_from_json,
    read_template_document,
    template_path,
)
from planner.storage import Storage

router = APIRouter()

LA_ITABA_TEMPLATE_FILE = "residential-property-template.json"


def _check_enum(value: Optional[str], allowed: tuple, message: str) -> None:
    if value is not None and value not in allowed:
        raise bad_request(message)


@router.get("", response_model=List[ProjectResponse], response_model_exclude_none=True)
async def list_projects(
    joined: bool = False,
    storage: Storage = Depends(get_storage),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """List projects, or only the ones the current user joined."""
    if not joined:
        return await storage.list_projects()

    current_user = await get_current_user(credentials, storage)
    return await storage.list_user_projects(current_user.id)


@router.post(
    "",
    response_model=ProjectResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(project_data: ProjectRequest, storage: Storage = Depends(get_storage)):
    """Create a project, optionally expanding a stored template into it."""
    name = validate_required_string(project_data.name, "name")
    if not name:
        raise bad_request("Project name is required")
    _check_enum(project_data.type, PROJECT_TYPES, "Invalid project type")
    _check_enum(project_data.status, PROJECT_STATUSES, "Invalid project status")

    description = optional_string(project_data.description)
    start_date = parse_optional_date(project_data.start_date, "startDate")
    end_date = parse_optional_date(project_data.end_date, "endDate")
    template_id = optional_uuid(project_data.template_id, "templateId")

    if template_id:
        template = await storage.get_template(template_id)
        if not template:
            raise not_found("Template")
        try:
            result = await initialize_project_from_template(
                storage,
                template,
                {
                    "name": name,
                    "description": description,
                    "start_date": start_date,
                    "end_date": end_date,
                },
            )
        except Exception as exc:
            handle_api_error(exc, "creating project from template", "Failed to create project")
        return result.project

    slug = optional_string(project_data.slug)
    try:
        return await storage.create_project(
            ProjectCreate(
                name=name,
                type=project_data.type or "Custom",
                status=project_data.status or "In Planning",
                description=description,
                start_date=start_date,
                end_date=end_date,
                slug=generate_slug(slug) if slug else None,
                participant_ids=validate_uuid_list(project_data.participant_ids, "participantIds"),
            )
        )
    except Exception as exc:
        handle_api_error(exc, "creating project", "Failed to create project")


@router.post("/init-la-itaba")
async def init_la_itaba(storage: Storage = Depends(get_storage)):
    """Create the 'La Itaba' property project from the bundled residential template."""
    existing = await storage.get_project_by_slug("la-itaba")
    if existing:
        raise bad_request("Project 'La Itaba' already exists")

    path = template_path(LA_ITABA_TEMPLATE_FILE)
    if not path.exists():
        raise not_found("Template file")

    try:
        templates = load_templates_from_json(await read_template_document(path), "Property")
        if not templates:
            raise bad_request("No templates found in JSON file")

        template = await ensure_template(storage, templates[0])
        result = await initialize_project_from_template(
            storage,
            template,
            {
                "name": "La Itaba",
                "description": "Property management for La Itaba residential property",
            },
            assign_team_members=True,
        )
    except Exception as exc:
        handle_api_error(exc, "creating La Itaba project", "Unknown error occurred")

    project = result.project
    return {
        "success": True,
        "message": "Project 'La Itaba' created successfully",
        "project": {
            "id": str(project.id),
            "name": project.name,
            "slug": project.slug,
            "type": project.type,
            "status": project.status,
        },
        "stats": {
            "areas": len(result.areas),
            "responsibilities": len(result.responsibilities),
            "tasks": len(result.tasks),
        },
        "areas": [
            {
                "id": str(area.id),
                "name": area.name,
                "taskCount": sum(1 for t in result.tasks if t.area_id == area.id),
            }
            for area in result.areas
        ],
    }


@router.get("/slug/{slug}", response_model=ProjectResponse, response_model_exclude_none=True)
async def get_project_by_slug(slug: str, storage: Storage = Depends(get_storage)):
    """Get a project by its URL slug."""
    project = await storage.get_project_by_slug(slug)
    if not project:
        raise not_found("Project")
    return project


@router.get("/{project_id}", response_model=ProjectResponse, response_model_exclude_none=True)
async def get_project(project_id: str, storage: Storage = Depends(get_storage)):
    """Get a project."""
    project = await storage.get_project(parse_uuid_param(project_id, "Project"))
    if not project:
        raise not_found("Project")
    return project


@router.put("/{project_id}", response_model=ProjectResponse, response_model_exclude_none=True)
async def update_project(
    project_id: str,
    project_data: ProjectRequest,
    storage: Storage = Depends(get_storage),
):
    """Update a project. Only the fields present in the body change."""
    project_uuid = parse_uuid_param(project_id, "Project")
    sent = project_data.model_fields_set

    fields = {}
    if "name" in sent:
        name = validate_required_string(project_data.name, "name")
        if not name:
            raise bad_request("Project name is required")
        fields["name"] = name

    _check_enum(project_data.type, PROJECT_TYPES, "Invalid project type")
    _check_enum(project_data.status, PROJECT_STATUSES, "Invalid project status")
    if project_data.type is not None:
        fields["type"] = project_data.type
    if project_data.status is not None:
        fields["status"] = project_data.status

    if "description" in sent:
        fields["description"] = optional_string(project_data.description)
    if "start_date" in sent:
        fields["start_date"] = parse_optional_date(project_data.start_date, "startDate")
    if "end_date" in sent:
        fields["end_date"] = parse_optional_date(project_data.end_date, "endDate")
    if "participant_ids" in sent:
        fields["participant_ids"] = validate_uuid_list(project_data.participant_ids, "participantIds")

    try:
        project = await storage.update_project(project_uuid, ProjectUpdate(**fields))
    except Exception as exc:
        handle_api_error(exc, "updating project", "Failed to update project")

    if not project:
        raise not_found("Project")
    return project


@router.get(
    "/{project_id}/overview",
    response_model=ProjectOverviewResponse,
    response_model_exclude_none=True,
)
async def get_project_overview(project_id: str, storage: Storage = Depends(get_storage)):
    """Project with area progress, meetings and participants."""
    project = await storage.get_project(parse_uuid_param(project_id, "Project"))
    if not project:
        raise not_found("Project")
    return await build_project_overview(storage, project)


@router.post(
    "/{project_id}/join",
    response_model=ProjectMembershipResponse,
    response_model_exclude_none=True,
)
async def join_project(
    project_id: str,
    storage: Storage = Depends(get_storage),
    current_user: UserResponse = Depends(get_current_user),
):
    """Add the current user to the project's participants."""
    project = await storage.join_project(
        parse_uuid_param(project_id, "Project"), current_user.id
    )
    if not project:
        raise not_found("Project")
    return ProjectMembershipResponse(project=project)


@router.delete(
    "/{project_id}/join",
    response_model=ProjectMembershipResponse,
    response_model_exclude_none=True,
)
async def leave_project(
    project_id: str,
    storage: Storage = Depends(get_storage),
    current_user: UserResponse = Depends(get_current_user),
):
    """Remove the current user from the project's participants."""
    project = await storage.leave_project(
        parse_uuid_param(project_id, "Project"), current_user.id
    )
    if not project:
        raise not_found("Project")
    return ProjectMembershipResponse(project=project)
