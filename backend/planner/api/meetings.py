"""
Meetings endpoints.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from planner.api.areas import require_project_id
from planner.api.deps import get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_uuid,
    parse_optional_date,
    parse_uuid_param,
    validate_required_string,
    validate_uuid_list,
)
from planner.schemas import (
    MeetingCreate,
    MeetingNoteResponse,
    MeetingRequest,
    MeetingResponse,
    MeetingUpdate,
)
from planner.storage import Storage

router = APIRouter()


def validate_meeting_input(meeting_data: MeetingRequest) -> dict:
    """Title, date and time are required; unusable attendee ids are dropped."""
    title = validate_required_string(meeting_data.title, "title")
    if not title:
        raise bad_request("Meeting title is required")
    if not meeting_data.date:
        raise bad_request("Meeting date is required")
    meeting_date = parse_optional_date(meeting_data.date, "date")
    time = validate_required_string(meeting_data.time, "time")
    if not time:
        raise bad_request("Meeting time is required")

    return {
        "title": title,
        "date": meeting_date,
        "time": time,
        "attendee_ids": validate_uuid_list(meeting_data.attendee_ids, "attendeeIds"),
    }


@router.get("", response_model=List[MeetingResponse], response_model_exclude_none=True)
async def list_meetings(
    projectId: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    """List meetings, newest first."""
    return await storage.list_meetings(project_id=optional_uuid(projectId, "projectId"))


@router.post(
    "",
    response_model=MeetingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_meeting(meeting_data: MeetingRequest, storage: Storage = Depends(get_storage)):
    """Create a meeting."""
    project_id = UUID(require_project_id(meeting_data.project_id))
    fields = validate_meeting_input(meeting_data)

    try:
        return await storage.create_meeting(MeetingCreate(project_id=project_id, **fields))
    except Exception as exc:
        handle_api_error(exc, "creating meeting", "Failed to create meeting")


@router.get("/{meeting_id}", response_model=MeetingResponse, response_model_exclude_none=True)
async def get_meeting(meeting_id: str, storage: Storage = Depends(get_storage)):
    """Get a meeting."""
    meeting = await storage.get_meeting(parse_uuid_param(meeting_id, "Meeting"))
    if not meeting:
        raise not_found("Meeting")
    return meeting


@router.put("/{meeting_id}", response_model=MeetingResponse, response_model_exclude_none=True)
async def update_meeting(
    meeting_id: str,
    meeting_data: MeetingRequest,
    storage: Storage = Depends(get_storage),
):
    """Replace a meeting's title, date, time and attendees."""
    meeting_uuid = parse_uuid_param(meeting_id, "Meeting")
    if not await storage.get_meeting(meeting_uuid):
        raise not_found("Meeting")

    fields = validate_meeting_input(meeting_data)

    try:
        meeting = await storage.update_meeting(meeting_uuid, MeetingUpdate(**fields))
    except Exception as exc:
        handle_api_error(exc, "updating meeting", "Failed to update meeting")

    if not meeting:
        raise not_found("Meeting")
    return meeting


@router.delete("/{meeting_id}")
async def delete_meeting(meeting_id: str, storage: Storage = Depends(get_storage)):
    """Delete a meeting and its note."""
    meeting_uuid = parse_uuid_param(meeting_id, "Meeting")
    if not await storage.get_meeting(meeting_uuid):
        raise not_found("Meeting")

    try:
        deleted = await storage.delete_meeting(meeting_uuid)
    except Exception as exc:
        handle_api_error(exc, "deleting meeting", "Failed to delete meeting")

    if not deleted:
        raise not_found("Meeting")
    return {"success": True}


@router.get(
    "/{meeting_id}/note",
    response_model=MeetingNoteResponse,
    response_model_exclude_none=True,
)
async def get_meeting_note(meeting_id: str, storage: Storage = Depends(get_storage)):
    """Get the note recorded for a meeting."""
    note = await storage.get_note_for_meeting(parse_uuid_param(meeting_id, "Meeting"))
    if not note:
        raise not_found("Meeting note")
    return note
