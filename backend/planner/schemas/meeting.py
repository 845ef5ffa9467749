"""
Meeting and meeting note schemas.
"""
import datetime as dt
from typing import Any, List, Optional
from uuid import UUID

from planner.schemas.base import CamelModel


class MeetingCreate(CamelModel):
    project_id: UUID
    title: str
    date: dt.date
    time: str
    attendee_ids: List[UUID] = []


class MeetingUpdate(CamelModel):
    title: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    attendee_ids: Optional[List[UUID]] = None


class MeetingResponse(CamelModel):
    id: UUID
    project_id: UUID
    title: str
    date: dt.date
    time: str
    attendee_ids: List[UUID] = []
    created_at: dt.datetime
    updated_at: dt.datetime


class MeetingNoteCreate(CamelModel):
    meeting_id: UUID
    content: str
    agenda: Optional[str] = None
    decisions: Optional[str] = None
    action_items: Optional[List[str]] = None
    created_by: Optional[UUID] = None


class MeetingNoteUpdate(CamelModel):
    content: Optional[str] = None
    agenda: Optional[str] = None
    decisions: Optional[str] = None
    action_items: Optional[List[str]] = None


class MeetingNoteResponse(CamelModel):
    id: UUID
    meeting_id: UUID
    content: str
    agenda: Optional[str] = None
    decisions: Optional[str] = None
    action_items: Optional[List[str]] = None
    created_by: Optional[UUID] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class MeetingRequest(CamelModel):
    """Body of meeting create and update requests."""

    project_id: Optional[str] = None
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    attendee_ids: Optional[List[Any]] = None


class MeetingNoteRequest(CamelModel):
    meeting_id: Optional[str] = None
    content: Optional[str] = None
    agenda: Optional[str] = None
    decisions: Optional[str] = None
    action_items: Optional[List[Any]] = None
