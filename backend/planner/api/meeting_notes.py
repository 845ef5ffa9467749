"""
Meeting notes endpoints.
"""
from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from planner.api.deps import get_current_user, get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_string,
    parse_uuid_param,
    validate_required_string,
    validate_uuid,
)
from planner.schemas import (
    MeetingNoteCreate,
    MeetingNoteRequest,
    MeetingNoteResponse,
    MeetingNoteUpdate,
    UserResponse,
)
from planner.storage import Storage

router = APIRouter()


def _action_items(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items or None


@router.post(
    "",
    response_model=MeetingNoteResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_meeting_note(
    note_data: MeetingNoteRequest,
    storage: Storage = Depends(get_storage),
    current_user: UserResponse = Depends(get_current_user),
):
    """Record the note for a meeting, authored by the current user."""
    meeting_id = validate_required_string(note_data.meeting_id, "meetingId")
    if not meeting_id:
        raise bad_request("Meeting ID is required")
    if not validate_uuid(meeting_id, "meetingId"):
        raise bad_request("Invalid meetingId: must be a valid UUID")

    content = validate_required_string(note_data.content, "content")
    if not content:
        raise bad_request("Meeting note content is required")

    meeting_uuid = UUID(meeting_id)
    if not await storage.get_meeting(meeting_uuid):
        raise not_found("Meeting")
    if await storage.get_note_for_meeting(meeting_uuid):
        raise bad_request("Meeting note already exists for this meeting")

    try:
        return await storage.create_meeting_note(
            MeetingNoteCreate(
                meeting_id=meeting_uuid,
                content=content,
                agenda=optional_string(note_data.agenda),
                decisions=optional_string(note_data.decisions),
                action_items=_action_items(note_data.action_items),
                created_by=current_user.id,
            )
        )
    except Exception as exc:
        handle_api_error(exc, "creating meeting note", "Failed to create meeting note")


@router.get("/{note_id}", response_model=MeetingNoteResponse, response_model_exclude_none=True)
async def get_meeting_note(note_id: str, storage: Storage = Depends(get_storage)):
    """Get a meeting note."""
    note = await storage.get_meeting_note(parse_uuid_param(note_id, "Meeting note"))
    if not note:
        raise not_found("Meeting note")
    return note


@router.put("/{note_id}", response_model=MeetingNoteResponse, response_model_exclude_none=True)
async def update_meeting_note(
    note_id: str,
    note_data: MeetingNoteRequest,
    storage: Storage = Depends(get_storage),
):
    """Update a meeting note. Content is required; other fields change only when sent."""
    note_uuid = parse_uuid_param(note_id, "Meeting note")
    if not await storage.get_meeting_note(note_uuid):
        raise not_found("Meeting note")

    sent = note_data.model_fields_set
    content = validate_required_string(note_data.content, "content")
    if not content:
        raise bad_request("Meeting note content is required")

    fields = {"content": content}
    if "agenda" in sent:
        fields["agenda"] = optional_string(note_data.agenda)
    if "decisions" in sent:
        fields["decisions"] = optional_string(note_data.decisions)
    if "action_items" in sent:
        fields["action_items"] = _action_items(note_data.action_items)

    try:
        note = await storage.update_meeting_note(note_uuid, MeetingNoteUpdate(**fields))
    except Exception as exc:
        handle_api_error(exc, "updating meeting note", "Failed to update meeting note")

    if not note:
        raise not_found("Meeting note")
    return note
