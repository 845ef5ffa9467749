"""
Aggregated read models backing the project views.
"""
from typing import List, Optional

from planner.schemas.base import CamelModel
from planner.schemas.area import AreaResponse
from planner.schemas.meeting import MeetingResponse
from planner.schemas.project import ProjectResponse
from planner.schemas.user import UserResponse


class TaskStats(CamelModel):
    total: int = 0
    completed: int = 0
    progress: int = 0


class AreaSummary(AreaResponse):
    lead: Optional[UserResponse] = None
    task_stats: TaskStats = TaskStats()


class MeetingSummary(MeetingResponse):
    has_notes: bool = False
    attendees: List[UserResponse] = []


class ProjectOverviewResponse(ProjectResponse):
    participants: List[UserResponse] = []
    task_stats: TaskStats = TaskStats()
    areas: List[AreaSummary] = []
    meetings: List[MeetingSummary] = []
