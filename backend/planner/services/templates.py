"""
Project templates: loading raw template documents and expanding a template
into a project with its areas, responsibilities and tasks.

Raw documents use the planning spreadsheet's Spanish keys::

    {
        "La Itaba": {
            "Areas": {
                "Mantenimiento": {
                    "Equipo": [{"name": "Ana Rojas"}],
                    "Responsabilidades": ["Jardines"],
                    "Secciones": ["Exterior"],
                    "Tareas": [{"tarea": "Podar", "estado": "Done", "etapa": "< 2 semanas"}]
                }
            }
        }
    }
"""
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from planner.config import settings
from planner.schemas import (
    AreaCreate,
    AreaResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectTemplateCreate,
    ProjectTemplateResponse,
    ProjectTemplateUpdate,
    ResponsibilityCreate,
    ResponsibilityResponse,
    TaskCreate,
    TaskResponse,
    TemplateArea,
    TemplateResponsibility,
    TemplateTask,
    TemplateTeamMember,
    UserCreate,
    UserResponse,
)
from planner.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_RESPONSIBILITY = "Tareas"

BUNDLED_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "data"

_ESTADO_TO_STATUS = {
    "Done": "completed",
    "In Progress": "in_progress",
}


@dataclass
class ExpansionResult:
    project: ProjectResponse
    areas: List[AreaResponse] = field(default_factory=list)
    responsibilities: List[ResponsibilityResponse] = field(default_factory=list)
    tasks: List[TaskResponse] = field(default_factory=list)


def map_estado_to_status(estado: Optional[str]) -> str:
    """Template 'estado' to task status; unknown values are pending."""
    return _ESTADO_TO_STATUS.get(estado, "pending")


def derive_initials(name: str) -> str:
    return "".join(part[0] for part in name.split()).upper()[:2]


def placeholder_email(name: str) -> str:
    return re.sub(r"\s+", ".", name.strip().lower()) + "@example.com"


def _convert_raw_area(area_name: str, raw: Dict[str, Any]) -> TemplateArea:
    tasks = [
        TemplateTask(
            title=item["tarea"],
            estado=item.get("estado"),
            etapa=item.get("etapa"),
            notes=item.get("notes"),
        )
        for item in raw.get("Tareas", [])
    ]

    names = raw.get("Responsabilidades") or [DEFAULT_RESPONSIBILITY]
    # Every responsibility carries the area's full task list.
    responsibilities = [
        TemplateResponsibility(name=name, tasks=list(tasks)) for name in names
    ]

    team = raw.get("Equipo")
    return TemplateArea(
        name=area_name,
        team=[TemplateTeamMember.model_validate(m) for m in team] if team else None,
        responsibilities=responsibilities,
        sections=raw.get("Secciones"),
    )


def load_templates_from_json(
    data: Dict[str, Any], project_type: str = "Conference"
) -> List[ProjectTemplateCreate]:
    """
    Convert a raw template document into template definitions.

    Args:
        data: Mapping of template name to ``{"Areas": {...}}`` (the ``Areas``
            wrapper may be omitted)
        project_type: Project type assigned to every template in the document

    Returns:
        One template per top-level key, in document order
    """
    templates = []
    for template_name, body in data.items():
        raw_areas = body.get("Areas", body) if isinstance(body, dict) else {}
        templates.append(
            ProjectTemplateCreate(
                name=template_name,
                project_type=project_type,
                areas=[_convert_raw_area(name, raw) for name, raw in raw_areas.items()],
            )
        )
    return templates


async def find_or_create_user(
    member: TemplateTeamMember,
    storage: Storage,
    seen: Optional[Dict[str, UserResponse]] = None,
) -> UserResponse:
    """
    Resolve a template team member to a user.

    Matches by exact email, then by case-insensitive name, and creates the
    user otherwise. ``seen`` caches users resolved during one expansion.
    """
    seen = seen if seen is not None else {}
    email_key = f"email:{member.email}" if member.email else None
    name_key = f"name:{member.name.lower()}"

    if email_key and email_key in seen:
        return seen[email_key]

    user = None
    if member.email:
        user = await storage.find_user_by_email(member.email)
    if user is None:
        user = seen.get(name_key) or await storage.find_user_by_name(member.name)
    if user is None:
        user = await storage.create_user(
            UserCreate(
                name=member.name,
                email=member.email or placeholder_email(member.name),
                initials=derive_initials(member.name),
                handle=member.handle,
                wallet=member.wallet,
            )
        )
        logger.debug("Created user %s for template member", user.id)

    if email_key:
        seen[email_key] = user
    seen[name_key] = user
    return user


def _task_description(task: TemplateTask) -> Optional[str]:
    parts = [p for p in (task.description, task.notes) if p]
    return "\n\n".join(parts) or None


async def initialize_project_from_template(
    storage: Storage,
    template: ProjectTemplateResponse,
    details: Dict[str, Any],
    assign_team_members: bool = True,
    default_task_status: Optional[str] = None,
) -> ExpansionResult:
    """
    Create a project and its nested rows from a stored template.

    Args:
        storage: Storage backend to write to
        template: Stored template to expand
        details: Project fields: name (required), description, start_date, end_date
        assign_team_members: Resolve each area's team into lead and participants
        default_task_status: Status for every task instead of the template's estado

    Returns:
        The created project, areas, responsibilities and tasks

    Rows created before a failure are kept.
    """
    project = await storage.create_project(
        ProjectCreate(
            name=details["name"],
            type=template.project_type,
            status="In Planning",
            description=details.get("description"),
            start_date=details.get("start_date"),
            end_date=details.get("end_date"),
        )
    )
    result = ExpansionResult(project=project)
    seen: Dict[str, UserResponse] = {}

    for template_area in template.areas:
        lead_id = None
        participant_ids = []
        if assign_team_members and template_area.team:
            members = [
                await find_or_create_user(member, storage, seen)
                for member in template_area.team
            ]
            lead_id = members[0].id
            participant_ids = [m.id for m in members[1:]]

        area = await storage.create_area(
            AreaCreate(
                project_id=project.id,
                name=template_area.name,
                description=template_area.description,
                lead_id=lead_id,
                participant_ids=participant_ids,
            )
        )
        result.areas.append(area)

        for template_responsibility in template_area.responsibilities:
            responsibility = await storage.create_responsibility(
                ResponsibilityCreate(
                    area_id=area.id,
                    name=template_responsibility.name,
                    description=template_responsibility.description,
                )
            )
            result.responsibilities.append(responsibility)

            for template_task in template_responsibility.tasks:
                task = await storage.create_task(
                    TaskCreate(
                        project_id=project.id,
                        area_id=area.id,
                        responsibility_id=responsibility.id,
                        title=template_task.title,
                        description=_task_description(template_task),
                        status=default_task_status or map_estado_to_status(template_task.estado),
                        support_resources=template_task.support_resources,
                        template_id=template.id,
                    )
                )
                result.tasks.append(task)

    logger.info(
        "Expanded template '%s' into project %s: %d areas, %d responsibilities, %d tasks",
        template.name,
        project.slug,
        len(result.areas),
        len(result.responsibilities),
        len(result.tasks),
    )
    return result


async def ensure_template(
    storage: Storage, template: ProjectTemplateCreate
) -> ProjectTemplateResponse:
    """Create the template, or refresh areas and description of the one with the same name."""
    existing = await storage.get_template_by_name(template.name)
    if existing is None:
        saved = await storage.create_template(template)
        logger.info("Created template '%s' (%s)", saved.name, saved.id)
        return saved

    saved = await storage.update_template(
        existing.id,
        ProjectTemplateUpdate(areas=template.areas, description=template.description),
    )
    logger.info("Updated template '%s' (%s)", saved.name, saved.id)
    return saved


def template_path(filename: str) -> Path:
    """Location of a template document in the configured (or bundled) template dir."""
    directory = Path(settings.template_dir) if settings.template_dir else BUNDLED_TEMPLATE_DIR
    return directory / filename


async def read_template_document(path: Path) -> Dict[str, Any]:
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return json.loads(await f.read())
