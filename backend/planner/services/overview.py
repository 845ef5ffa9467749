"""
Aggregated project data for the project detail views.
"""
from typing import Dict, List
from uuid import UUID

from planner.schemas import (
    AreaSummary,
    MeetingSummary,
    ProjectOverviewResponse,
    ProjectResponse,
    TaskResponse,
    TaskStats,
    UserResponse,
)
from planner.storage import Storage


def calculate_task_stats(tasks: List[TaskResponse]) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == "completed")
    progress = round(completed / total * 100) if total else 0
    return TaskStats(total=total, completed=completed, progress=progress)


async def build_project_overview(
    storage: Storage, project: ProjectResponse
) -> ProjectOverviewResponse:
    """Project with area task stats, meetings and resolved users."""
    users: Dict[UUID, UserResponse] = {u.id: u for u in await storage.list_users()}
    tasks = await storage.list_tasks(project_id=project.id)

    areas = []
    for area in await storage.list_areas(project_id=project.id):
        area_tasks = [t for t in tasks if t.area_id == area.id]
        areas.append(
            AreaSummary(
                **area.model_dump(),
                lead=users.get(area.lead_id) if area.lead_id else None,
                task_stats=calculate_task_stats(area_tasks),
            )
        )

    meetings = []
    for meeting in await storage.list_meetings(project_id=project.id):
        note = await storage.get_note_for_meeting(meeting.id)
        meetings.append(
            MeetingSummary(
                **meeting.model_dump(),
                has_notes=note is not None,
                attendees=[users[i] for i in meeting.attendee_ids if i in users],
            )
        )

    return ProjectOverviewResponse(
        **project.model_dump(),
        participants=[users[i] for i in project.participant_ids if i in users],
        task_stats=calculate_task_stats(tasks),
        areas=areas,
        meetings=meetings,
    )
