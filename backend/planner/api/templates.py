"""
Project templates endpoints.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError

from planner.api.deps import get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    parse_uuid_param,
    validate_required_string,
)
from planner.schemas import (
    PROJECT_TYPES,
    ProjectTemplateCreate,
    ProjectTemplateResponse,
    TemplateRequest,
)
from planner.services.templates import ensure_template, load_templates_from_json
from planner.storage import Storage

router = APIRouter()


@router.get("", response_model=List[ProjectTemplateResponse], response_model_exclude_none=True)
async def list_templates(storage: Storage = Depends(get_storage)):
    """List stored templates."""
    return await storage.list_templates()


@router.post(
    "",
    response_model=ProjectTemplateResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_template(
    template_data: TemplateRequest,
    storage: Storage = Depends(get_storage),
):
    """Create a template from its structured form."""
    name = validate_required_string(template_data.name, "name")
    if not name:
        raise bad_request("Template name is required")
    if await storage.get_template_by_name(name):
        raise bad_request(f"Template '{name}' already exists")

    try:
        data = ProjectTemplateCreate.model_validate(
            {**template_data.model_dump(exclude_none=True), "name": name}
        )
    except ValidationError:
        raise bad_request("Invalid template definition")

    try:
        return await storage.create_template(data)
    except Exception as exc:
        handle_api_error(exc, "creating template", "Failed to create template")


@router.post(
    "/import",
    response_model=List[ProjectTemplateResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def import_templates(
    document: Dict[str, Any] = Body(...),
    projectType: str = "Conference",
    storage: Storage = Depends(get_storage),
):
    """Import raw template documents, creating or refreshing templates by name."""
    if projectType not in PROJECT_TYPES:
        raise bad_request("Invalid project type")

    try:
        templates = load_templates_from_json(document, projectType)
    except (KeyError, TypeError, AttributeError, ValidationError):
        raise bad_request("Invalid template document")

    if not templates:
        raise bad_request("No templates found in JSON document")

    try:
        return [await ensure_template(storage, template) for template in templates]
    except Exception as exc:
        handle_api_error(exc, "importing templates", "Failed to import templates")


@router.get(
    "/{template_id}",
    response_model=ProjectTemplateResponse,
    response_model_exclude_none=True,
)
async def get_template(template_id: str, storage: Storage = Depends(get_storage)):
    """Get a template."""
    template = await storage.get_template(parse_uuid_param(template_id, "Template"))
    if not template:
        raise not_found("Template")
    return template
