"""Build fresh week documents from the template catalog."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

from workout_engine.models.enums import WeekStatus
from workout_engine.templates import WeekTemplate, get_template


def get_monday(today: date | None = None) -> str:
    """ISO date of the Monday that starts the week containing *today*.

    Sunday belongs to the week that began the previous Monday.
    """
    if today is None:
        today = date.today()
    if isinstance(today, datetime):
        today = today.date()
    return (today - timedelta(days=today.weekday())).isoformat()


def build_sets(count: int) -> list[dict[str, Any]]:
    """Blank, not-done sets numbered from 1."""
    return [
        {"set": i, "weight": "", "repsOrSec": "", "rpe": "", "done": False}
        for i in range(1, count + 1)
    ]


def create_week(
    template_index: int,
    week_of: str | None = None,
    now: datetime | None = None,
    templates: tuple[WeekTemplate, ...] | None = None,
    user_id: str | None = None,
) -> dict[str, Any]:
    """Return a new active week document ready to insert.

    Out-of-range template indexes fall back to the first template (the
    requested index is still recorded so the rotation continues from it).
    """
    template = get_template(template_index, templates)
    if now is None:
        now = datetime.now(timezone.utc)

    days = [
        {
            "id": f"{template.key}-{day.id}",
            "shortName": day.short_name,
            "name": day.name,
            "exercises": [
                {
                    "name": exercise.name,
                    "target": exercise.target,
                    "how": exercise.how,
                    "type": exercise.type.value,
                    "sets": build_sets(exercise.sets),
                }
                for exercise in day.exercises
            ],
        }
        for day in template.days
    ]

    doc: dict[str, Any] = {
        "weekOf": week_of or get_monday(now.date()),
        "templateKey": template.key,
        "templateTitle": template.title,
        "templateIndex": template_index,
        "description": template.description,
        "status": WeekStatus.ACTIVE.value,
        "createdAt": now,
        "updatedAt": now,
        "days": days,
    }
    if user_id is not None:
        doc["userId"] = user_id
    return doc
