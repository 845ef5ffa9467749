"""
Request validation helpers shared by the API routers.

Request bodies are bound to loosely typed models and each field is checked
here, so every missing or malformed field gets its own message. Errors are
raised as ``HTTPException`` and rendered as ``{"error": detail}`` by the
handlers in ``planner.main``.
"""
import logging
import re
from datetime import date
from typing import Any, List, NoReturn, Optional
from uuid import UUID

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def not_found(entity_name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity_name} not found",
    )


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def handle_api_error(exc: Exception, operation: str, default_message: Optional[str] = None) -> NoReturn:
    """
    Log an unexpected failure and re-raise it as an HTTP error.

    Messages mentioning "Invalid" are treated as client errors (400);
    everything else is a server error (500).
    """
    if isinstance(exc, HTTPException):
        raise exc

    logger.exception("Error %s", operation)
    message = str(exc) or default_message or f"Failed to {operation}"
    status_code = (
        status.HTTP_400_BAD_REQUEST if "Invalid" in message
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    raise HTTPException(status_code=status_code, detail=message) from exc


def validate_required_string(value: Any, field_name: str) -> Optional[str]:
    """Trimmed string, or None for non-strings and blank strings."""
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def validate_uuid(value: Any, field_name: str) -> Optional[str]:
    """The value if it has the canonical UUID shape, else None."""
    if not isinstance(value, str) or not UUID_PATTERN.match(value):
        return None
    return value


def validate_uuid_list(values: Any, field_name: str) -> List[UUID]:
    """Keep the UUID-shaped items of a list."""
    if not isinstance(values, list):
        return []
    return [UUID(v) for v in values if validate_uuid(v, field_name)]


def optional_uuid(value: Any, field_name: str) -> Optional[UUID]:
    """UUID for a well-formed id, None for null/empty, 400 otherwise."""
    if value is None or value == "":
        return None
    if not validate_uuid(value, field_name):
        raise bad_request(f"Invalid {field_name}: must be a valid UUID")
    return UUID(value)


def parse_uuid_param(value: str, entity_name: str) -> UUID:
    """Path id to UUID; malformed ids cannot exist, so they are reported missing."""
    if not validate_uuid(value, entity_name):
        raise not_found(entity_name)
    return UUID(value)


def parse_support_resources(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        items = [line.strip() for line in value.split("\n")]
    elif isinstance(value, list):
        items = [item.strip() for item in value if isinstance(item, str)]
    else:
        return None

    items = [item for item in items if item]
    return items or None


def parse_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise bad_request(f"Invalid {field_name}: must be a date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise bad_request(f"Invalid {field_name}: must be a date (YYYY-MM-DD)")


def optional_string(value: Any) -> Optional[str]:
    """Trimmed string or None; used for optional free-text fields."""
    if not isinstance(value, str):
        return None
    return value.strip() or None
