"""Shared option parsing for commands."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import typer

from taskflow.models.core import utc_now

PRIORITIES = ("critical", "high", "medium", "low")


def parse_due_date(value: str | None) -> datetime | None:
    """Parse ``--due``: ISO date/datetime, "today", "tomorrow" or "+Nd".

    Naive values are taken as UTC. Dates without a time mean midnight.
    """
    if value is None:
        return None
    text = value.strip().lower()
    if text in ("", "none"):
        return None

    today = utc_now().replace(hour=0, minute=0, second=0, microsecond=0)
    if text == "today":
        return today
    if text == "tomorrow":
        return today + timedelta(days=1)
    if text.startswith("+") and text.endswith("d") and text[1:-1].isdigit():
        return today + timedelta(days=int(text[1:-1]))

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise typer.BadParameter(
            f"Invalid date '{value}'. Use YYYY-MM-DD, an ISO datetime, today, tomorrow or +Nd."
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_priority(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in ("", "none"):
        return None
    if normalized not in PRIORITIES:
        raise typer.BadParameter(f"Priority must be one of: {', '.join(PRIORITIES)}")
    return normalized
