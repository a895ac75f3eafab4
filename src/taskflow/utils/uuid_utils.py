"""UUID helpers for TaskFlow.

Provides short UUID display and resolution of id prefixes (or names) typed
on the command line to full ids.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

# Relaxed UUID pattern (any version)
UUID_RELAXED_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_valid_uuid(value: str) -> bool:
    """Check if a string is a valid UUID.

    Args:
        value: String to validate

    Returns:
        True if value is a valid UUID
    """
    if not isinstance(value, str):
        return False
    return UUID_RELAXED_PATTERN.match(value) is not None


def shorten_uuid(uuid: str, length: int = 8) -> str:
    """Get shortened version of UUID.

    Args:
        uuid: Full UUID string
        length: Number of characters to return (default 8)

    Returns:
        First N characters of UUID
    """
    return uuid[:length]


def resolve_id(
    query: str,
    items: Iterable[T],
    *,
    kind: str,
    get_id: Callable[[T], str],
    get_name: Callable[[T], str] | None = None,
) -> T:
    """Resolve an id, id prefix or name to exactly one item.

    Tries in order: exact id → unique id prefix → case-insensitive name.

    Args:
        query: Full id, id prefix, or name. May be prefixed with ``#``
        items: Candidates
        kind: Entity kind for error messages ("board", "task", ...)
        get_id: Returns an item's id
        get_name: Returns an item's name/title, if names are searchable

    Returns:
        The matching item

    Raises:
        ValueError: If nothing matches or the query is ambiguous
    """
    stripped = query.strip().lstrip("#")
    normalized = stripped.lower()
    items = list(items)

    for item in items:
        if get_id(item).lower() == normalized:
            return item

    if normalized:
        prefixed = [item for item in items if get_id(item).lower().startswith(normalized)]
        if len(prefixed) == 1:
            return prefixed[0]
        if len(prefixed) > 1:
            matches = ", ".join(shorten_uuid(get_id(item)) for item in prefixed[:5])
            if len(prefixed) > 5:
                matches += f", ... ({len(prefixed)} total)"
            raise ValueError(
                f"Ambiguous ID '{stripped}' matches {len(prefixed)} {kind}s: {matches}"
            )

    if get_name is not None:
        named = [item for item in items if get_name(item).lower() == normalized]
        if len(named) == 1:
            return named[0]
        if len(named) > 1:
            matches = ", ".join(shorten_uuid(get_id(item)) for item in named[:5])
            raise ValueError(f"Ambiguous name '{stripped}' matches {len(named)} {kind}s: {matches}")

    raise ValueError(f"{kind.capitalize()} not found: '{stripped}'")
