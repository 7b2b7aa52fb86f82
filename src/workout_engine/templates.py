"""Weekly workout templates.

The catalog itself is data (``data/week_templates.json``); this module only
loads it and picks templates by index.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from workout_engine.models.enums import ExerciseType

_DEFAULT_CATALOG = Path(__file__).parent / "data" / "week_templates.json"


@dataclass(frozen=True)
class TemplateExercise:
    name: str
    sets: int
    target: str = ""
    how: str = ""
    type: ExerciseType = ExerciseType.REPS
    suggested_weight: str = ""


@dataclass(frozen=True)
class TemplateDay:
    id: str
    short_name: str
    name: str
    exercises: tuple[TemplateExercise, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WeekTemplate:
    key: str
    title: str
    description: str = ""
    days: tuple[TemplateDay, ...] = field(default_factory=tuple)


def _exercise_from_dict(data: dict[str, Any]) -> TemplateExercise:
    return TemplateExercise(
        name=data["name"],
        sets=int(data["sets"]),
        target=data.get("target", ""),
        how=data.get("how", ""),
        type=ExerciseType(data.get("type", ExerciseType.REPS.value)),
        suggested_weight=data.get("suggestedWeight", ""),
    )


def _template_from_dict(data: dict[str, Any]) -> WeekTemplate:
    return WeekTemplate(
        key=data["key"],
        title=data["title"],
        description=data.get("description", ""),
        days=tuple(
            TemplateDay(
                id=day["id"],
                short_name=day.get("shortName", ""),
                name=day["name"],
                exercises=tuple(_exercise_from_dict(e) for e in day.get("exercises", [])),
            )
            for day in data.get("days", [])
        ),
    )


def load_templates(path: Path | str | None = None) -> tuple[WeekTemplate, ...]:
    """Load a template catalog from JSON (``{"templates": [...]}``).

    With no *path* the bundled catalog is used and cached.
    """
    if path is None:
        return _bundled_templates()
    return _read_catalog(Path(path))


def _read_catalog(path: Path) -> tuple[WeekTemplate, ...]:
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    return tuple(_template_from_dict(t) for t in payload.get("templates", []))


@lru_cache(maxsize=1)
def _bundled_templates() -> tuple[WeekTemplate, ...]:
    return _read_catalog(_DEFAULT_CATALOG)


def get_template(
    index: int, templates: tuple[WeekTemplate, ...] | None = None
) -> WeekTemplate:
    """Return the template at *index*, or the first one if out of range."""
    catalog = templates if templates is not None else load_templates()
    if not catalog:
        raise LookupError("Template catalog is empty")
    if 0 <= index < len(catalog):
        return catalog[index]
    return catalog[0]


def is_valid_template_index(
    index: object, templates: tuple[WeekTemplate, ...] | None = None
) -> bool:
    catalog = templates if templates is not None else load_templates()
    return (
        isinstance(index, int)
        and not isinstance(index, bool)
        and 0 <= index < len(catalog)
    )


def next_template_index(
    current: int, templates: tuple[WeekTemplate, ...] | None = None
) -> int:
    """Cycle to the template after *current*, wrapping around."""
    catalog = templates if templates is not None else load_templates()
    if not catalog:
        return 0
    return (current + 1) % len(catalog)
