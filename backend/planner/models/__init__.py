"""
SQLAlchemy models for the planner database.
"""
from planner.models.user import User
from planner.models.project import Project, ProjectParticipant
from planner.models.area import Area, AreaParticipant, Responsibility
from planner.models.task import Task, TaskDependency
from planner.models.meeting import Meeting, MeetingAttendee, MeetingNote
from planner.models.template import ProjectTemplate

__all__ = [
    "User",
    "Project",
    "ProjectParticipant",
    "Area",
    "AreaParticipant",
    "Responsibility",
    "Task",
    "TaskDependency",
    "Meeting",
    "MeetingAttendee",
    "MeetingNote",
    "ProjectTemplate",
]
