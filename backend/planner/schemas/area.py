"""
Area and responsibility schemas.
"""
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import StrictInt

from planner.schemas.base import CamelModel


class AreaCreate(CamelModel):
    project_id: UUID
    name: str
    description: Optional[str] = None
    lead_id: Optional[UUID] = None
    participant_ids: List[UUID] = []
    order: Optional[int] = None


class AreaUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    lead_id: Optional[UUID] = None
    participant_ids: Optional[List[UUID]] = None
    order: Optional[int] = None


class AreaOrder(CamelModel):
    id: UUID
    order: int


class AreaResponse(CamelModel):
    id: UUID
    project_id: UUID
    name: str
    description: Optional[str] = None
    lead_id: Optional[UUID] = None
    participant_ids: List[UUID] = []
    order: int = 0
    created_at: datetime
    updated_at: datetime


class ResponsibilityCreate(CamelModel):
    area_id: UUID
    name: str
    description: Optional[str] = None


class ResponsibilityResponse(CamelModel):
    id: UUID
    area_id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AreaRequest(CamelModel):
    """Body of area create and update requests."""

    project_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    lead_id: Optional[str] = None
    participant_ids: Optional[List[Any]] = None
    order: Optional[StrictInt] = None


class AreaOrderItem(CamelModel):
    id: Optional[str] = None
    order: StrictInt


class AreaReorderRequest(CamelModel):
    project_id: Optional[str] = None
    area_orders: Optional[List[AreaOrderItem]] = None
