"""
URL slugs for projects.
"""
import re
from typing import Awaitable, Callable

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

DEFAULT_SLUG = "project"


def generate_slug(name: str) -> str:
    """'La Itaba 2025!' -> 'la-itaba-2025'. Names with no usable characters get DEFAULT_SLUG."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-") or DEFAULT_SLUG


async def make_unique_slug(base: str, is_taken: Callable[[str], Awaitable[bool]]) -> str:
    """Append -1, -2, ... to ``base`` until ``is_taken`` reports a free slug."""
    candidate = base
    counter = 1
    while await is_taken(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
