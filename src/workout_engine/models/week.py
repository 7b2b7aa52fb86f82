"""Week, day, exercise and set records as logged by the user.

The stored documents (and the JSON exchanged with clients) use camelCase
keys; the dataclasses use snake_case attributes. ``from_dict`` / ``to_dict``
translate between the two shapes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from workout_engine.models.enums import ExerciseType, WeekStatus


def format_timestamp(value: datetime | str | None) -> str:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are taken as UTC (that is what pymongo hands back).
    Strings pass through untouched and ``None`` becomes ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def _require_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{kind} must be an object, got {type(data).__name__}")
    return data


def _require_list(data: Any, kind: str) -> Sequence[Any]:
    if not isinstance(data, (list, tuple)):
        raise ValueError(f"{kind} must be a list, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class SetEntry:
    """One logged set. Weight, reps/seconds and RPE are free text."""

    set: int  # 1-based position within the exercise
    weight: str = ""
    reps_or_sec: str = ""
    rpe: str = ""
    done: bool = False

    @classmethod
    def from_dict(cls, data: Any, position: int = 1) -> SetEntry:
        data = _require_mapping(data, "set")
        raw_set = data.get("set", position)
        if isinstance(raw_set, bool) or not isinstance(raw_set, int):
            raise ValueError(f"set number must be an integer, got {raw_set!r}")
        done = data.get("done", False)
        if not isinstance(done, bool):
            raise ValueError(f"done must be a boolean, got {done!r}")
        return cls(
            set=raw_set,
            weight=_text(data, "weight"),
            reps_or_sec=_text(data, "repsOrSec"),
            rpe=_text(data, "rpe"),
            done=done,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "set": self.set,
            "weight": self.weight,
            "repsOrSec": self.reps_or_sec,
            "rpe": self.rpe,
            "done": self.done,
        }


@dataclass(frozen=True)
class ExerciseEntry:
    """An exercise within a day, with its ordered sets."""

    name: str
    target: str = ""
    how: str = ""
    type: ExerciseType = ExerciseType.REPS
    sets: tuple[SetEntry, ...] = field(default_factory=tuple)

    @property
    def completed_sets(self) -> int:
        return sum(1 for s in self.sets if s.done)

    @classmethod
    def from_dict(cls, data: Any) -> ExerciseEntry:
        data = _require_mapping(data, "exercise")
        raw_sets = _require_list(data.get("sets", []), "sets")
        return cls(
            name=_text(data, "name"),
            target=_text(data, "target"),
            how=_text(data, "how"),
            type=ExerciseType(data.get("type", ExerciseType.REPS.value)),
            sets=tuple(
                SetEntry.from_dict(s, position=i)
                for i, s in enumerate(raw_sets, start=1)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target": self.target,
            "how": self.how,
            "type": self.type.value,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass(frozen=True)
class DayEntry:
    """A training day. Position within the week is meaningful."""

    id: str
    name: str
    short_name: str = ""
    exercises: tuple[ExerciseEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> DayEntry:
        data = _require_mapping(data, "day")
        raw_exercises = _require_list(data.get("exercises", []), "exercises")
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            short_name=_text(data, "shortName"),
            exercises=tuple(ExerciseEntry.from_dict(e) for e in raw_exercises),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "shortName": self.short_name,
            "name": self.name,
            "exercises": [e.to_dict() for e in self.exercises],
        }


def parse_days(raw_days: Any) -> tuple[DayEntry, ...]:
    """Validate a client-supplied ``days`` payload.

    Raises ValueError when the payload is not a list of day objects.
    """
    return tuple(DayEntry.from_dict(d) for d in _require_list(raw_days, "days"))


@dataclass(frozen=True)
class WeekRecord:
    """A stored weekly plan instance with everything the user logged.

    ``week_of`` is the ISO date of the Monday starting the week. Several raw
    records may share a ``week_of``; see ``workout_engine.dedup``.
    """

    id: str
    week_of: str
    status: WeekStatus = WeekStatus.ACTIVE
    created_at: str = ""
    updated_at: str = ""
    days: tuple[DayEntry, ...] = field(default_factory=tuple)
    template_key: str = ""
    template_title: str = ""
    template_index: int = 0
    description: str = ""
    archived_at: str | None = None
    user_id: str | None = None

    @property
    def is_archived(self) -> bool:
        return self.status is WeekStatus.ARCHIVED

    def with_days(self, days: tuple[DayEntry, ...]) -> WeekRecord:
        return replace(self, days=days)

    @classmethod
    def from_dict(cls, data: Any) -> WeekRecord:
        """Build from the camelCase JSON shape (``id`` rather than ``_id``)."""
        data = _require_mapping(data, "week")
        archived_at = data.get("archivedAt")
        user_id = data.get("userId")
        return cls(
            id=_text(data, "id"),
            week_of=_text(data, "weekOf"),
            status=WeekStatus(data.get("status") or WeekStatus.ACTIVE.value),
            created_at=format_timestamp(data.get("createdAt")),
            updated_at=format_timestamp(data.get("updatedAt")),
            days=parse_days(data.get("days", [])),
            template_key=_text(data, "templateKey"),
            template_title=_text(data, "templateTitle"),
            template_index=int(data.get("templateIndex") or 0),
            description=_text(data, "description"),
            archived_at=format_timestamp(archived_at) if archived_at else None,
            user_id=str(user_id) if user_id is not None else None,
        )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> WeekRecord:
        """Build from a raw MongoDB document (``_id`` is an ObjectId)."""
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "weekOf": self.week_of,
            "templateKey": self.template_key,
            "templateTitle": self.template_title,
            "templateIndex": self.template_index,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "archivedAt": self.archived_at,
            "days": [d.to_dict() for d in self.days],
        }
