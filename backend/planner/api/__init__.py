"""
API routers for the planner.
"""
from planner.api import users, projects, areas, tasks
from planner.api import meetings, meeting_notes, templates

__all__ = [
    "users",
    "projects",
    "areas",
    "tasks",
    "meetings",
    "meeting_notes",
    "templates",
]
