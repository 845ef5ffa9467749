"""
Areas endpoints.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from planner.api.deps import get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_string,
    optional_uuid,
    parse_uuid_param,
    validate_required_string,
    validate_uuid,
    validate_uuid_list,
)
from planner.schemas import (
    AreaCreate,
    AreaOrder,
    AreaReorderRequest,
    AreaRequest,
    AreaResponse,
    AreaUpdate,
)
from planner.storage import Storage

router = APIRouter()


def require_project_id(value) -> str:
    if not value:
        raise bad_request("Project ID is required")
    if not validate_uuid(value, "projectId"):
        raise bad_request("Invalid projectId: must be a valid UUID")
    return value


@router.get("", response_model=List[AreaResponse], response_model_exclude_none=True)
async def list_areas(
    projectId: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """List areas, optionally for a single project."""
    project_id = optional_uuid(projectId, "projectId")
    return await storage.list_areas(project_id=project_id)


@router.post(
    "",
    response_model=AreaResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_area(area_data: AreaRequest, storage: Storage = Depends(get_storage)):
    """Create an area in a project."""
    project_id = require_project_id(area_data.project_id)
    name = validate_required_string(area_data.name, "name")
    if not name:
        raise bad_request("Area name is required")

    data = AreaCreate(
        project_id=project_id,
        name=name,
        description=optional_string(area_data.description),
        lead_id=optional_uuid(area_data.lead_id, "leadId"),
        participant_ids=validate_uuid_list(area_data.participant_ids, "participantIds"),
        order=area_data.order,
    )

    try:
        return await storage.create_area(data)
    except Exception as exc:
        handle_api_error(exc, "creating area", "Failed to create area")


@router.patch("")
async def reorder_areas(
    reorder_data: AreaReorderRequest,
    storage: Storage = Depends(get_storage),
):
    """Bulk update the display order of a project's areas."""
    project_id = require_project_id(reorder_data.project_id)
    if reorder_data.area_orders is None:
        raise bad_request("areaOrders must be an array")

    orders = []
    for item in reorder_data.area_orders:
        if not validate_uuid(item.id, "id"):
            raise bad_request("Invalid areaOrders: each item needs a valid UUID id")
        orders.append(AreaOrder(id=item.id, order=item.order))

    try:
        await storage.reorder_areas(UUID(project_id), orders)
    except Exception as exc:
        handle_api_error(exc, "reordering areas", "Failed to reorder areas")
    return {"success": True}


@router.get("/{area_id}", response_model=AreaResponse, response_model_exclude_none=True)
async def get_area(area_id: str, storage: Storage = Depends(get_storage)):
    """Get an area."""
    area = await storage.get_area(parse_uuid_param(area_id, "Area"))
    if not area:
        raise not_found("Area")
    return area


@router.put("/{area_id}", response_model=AreaResponse, response_model_exclude_none=True)
async def update_area(
    area_id: str,
    area_data: AreaRequest,
    storage: Storage = Depends(get_storage),
):
    """Update an area. Only the fields present in the body change."""
    area_uuid = parse_uuid_param(area_id, "Area")
    sent = area_data.model_fields_set

    fields = {}
    if "name" in sent:
        name = validate_required_string(area_data.name, "name")
        if not name:
            raise bad_request("Area name is required")
        fields["name"] = name
    if "description" in sent:
        fields["description"] = optional_string(area_data.description)
    if "lead_id" in sent:
        fields["lead_id"] = optional_uuid(area_data.lead_id, "leadId")
    if "participant_ids" in sent:
        fields["participant_ids"] = validate_uuid_list(area_data.participant_ids, "participantIds")
    if area_data.order is not None:
        fields["order"] = area_data.order

    try:
        area = await storage.update_area(area_uuid, AreaUpdate(**fields))
    except Exception as exc:
        handle_api_error(exc, "updating area", "Failed to update area")

    if not area:
        raise not_found("Area")
    return area


@router.delete("/{area_id}")
async def delete_area(area_id: str, storage: Storage = Depends(get_storage)):
    """Delete an area and its responsibilities. Its tasks are kept."""
    area_uuid = parse_uuid_param(area_id, "Area")
    if not await storage.get_area(area_uuid):
        raise not_found("Area")

    try:
        deleted = await storage.delete_area(area_uuid)
    except Exception as exc:
        handle_api_error(exc, "deleting area", "Failed to delete area")

    if not deleted:
        raise not_found("Area")
    return {"success": True}
