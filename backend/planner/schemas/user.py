"""
User schemas.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from planner.schemas.base import CamelModel


class UserCreate(CamelModel):
    name: str
    email: str
    initials: str
    avatar: Optional[str] = None
    handle: Optional[str] = None
    wallet: Optional[str] = None


class UserResponse(CamelModel):
    id: UUID
    name: str
    email: str
    initials: str
    avatar: Optional[str] = None
    handle: Optional[str] = None
    wallet: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserRequest(CamelModel):
    """Body of ``POST /api/users``. Required fields are checked by the router."""

    name: Optional[str] = None
    email: Optional[str] = None
    initials: Optional[str] = None
    avatar: Optional[str] = None
    handle: Optional[str] = None
    wallet: Optional[str] = None
