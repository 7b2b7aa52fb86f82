"""Derived progress entities — computed for the dashboard, never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from workout_engine.models.enums import WeekStatus


@dataclass(frozen=True)
class ProgressDay:
    id: str
    name: str
    short_name: str
    completed: int
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "shortName": self.short_name,
            "completed": self.completed,
            "total": self.total,
        }


@dataclass(frozen=True)
class ProgressWeek:
    """Set counts for one week, summed bottom-up from its days."""

    id: str
    week_of: str
    label: str
    long_label: str
    updated_at: str
    template_title: str
    status: WeekStatus
    completed: int
    total: int
    completion_rate: float
    days: tuple[ProgressDay, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "weekOf": self.week_of,
            "label": self.label,
            "longLabel": self.long_label,
            "updatedAt": self.updated_at,
            "templateTitle": self.template_title,
            "status": self.status.value,
            "completed": self.completed,
            "total": self.total,
            "completionRate": self.completion_rate,
            "days": [d.to_dict() for d in self.days],
        }


@dataclass(frozen=True)
class ProgressDayAverage:
    """Completion across all weeks for one (position, day name) bucket."""

    key: str  # "<index>-<day name>"
    label: str
    completed: int
    total: int
    completion_rate: float
    index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "completed": self.completed,
            "total": self.total,
            "completionRate": self.completion_rate,
            "index": self.index,
        }


@dataclass(frozen=True)
class ProgressTotals:
    completed: int = 0
    total: int = 0
    week_count: int = 0
    day_count: int = 0  # days with at least one completed set
    average_completion: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed": self.completed,
            "total": self.total,
            "weekCount": self.week_count,
            "dayCount": self.day_count,
            "averageCompletion": self.average_completion,
        }


@dataclass(frozen=True)
class ProgressData:
    """Everything the progress dashboard renders."""

    weeks: tuple[ProgressWeek, ...] = field(default_factory=tuple)
    totals: ProgressTotals = field(default_factory=ProgressTotals)
    day_averages: tuple[ProgressDayAverage, ...] = field(default_factory=tuple)
    highlight_week_id: str | None = None
    latest_week_id: str | None = None
    current_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "weeks": [w.to_dict() for w in self.weeks],
            "totals": self.totals.to_dict(),
            "dayAverages": [d.to_dict() for d in self.day_averages],
            "highlightWeekId": self.highlight_week_id,
            "latestWeekId": self.latest_week_id,
            "currentStreak": self.current_streak,
        }
