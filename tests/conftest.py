"""Shared test fixtures: week records with controllable set completion."""

from __future__ import annotations

from typing import Callable

import pytest

from workout_engine.models.enums import ExerciseType, WeekStatus
from workout_engine.models.week import DayEntry, ExerciseEntry, SetEntry, WeekRecord


def _make_day(index: int, completed: int, total: int, name: str | None = None) -> DayEntry:
    """One day holding a single exercise with *total* sets, *completed* done."""
    sets = tuple(
        SetEntry(set=i, weight="60", reps_or_sec="10", rpe="6", done=i <= completed)
        for i in range(1, total + 1)
    )
    return DayEntry(
        id=f"foundation-day{index}",
        name=name or f"Day {index}",
        short_name=f"Day {index}",
        exercises=(
            ExerciseEntry(
                name="Leg Press",
                target="8–12 reps",
                how="Push through mid-foot.",
                type=ExerciseType.REPS,
                sets=sets,
            ),
        ),
    )


def _make_week(
    week_id: str = "w1",
    week_of: str = "2025-10-06",
    status: WeekStatus = WeekStatus.ACTIVE,
    updated_at: str = "2025-10-08T12:00:00.000Z",
    created_at: str = "2025-10-06T08:00:00.000Z",
    counts: tuple[tuple[int, int], ...] = ((0, 3),),
    day_names: tuple[str, ...] | None = None,
    template_title: str = "Foundation Push / Pull / Posterior",
) -> WeekRecord:
    """Build a week; *counts* holds one ``(completed, total)`` pair per day."""
    days = tuple(
        _make_day(i, completed, total, day_names[i - 1] if day_names else None)
        for i, (completed, total) in enumerate(counts, start=1)
    )
    return WeekRecord(
        id=week_id,
        week_of=week_of,
        status=status,
        created_at=created_at,
        updated_at=updated_at,
        days=days,
        template_key="foundation",
        template_title=template_title,
        template_index=0,
        description="Balanced push, pull, and posterior chain focus.",
    )


@pytest.fixture
def make_week() -> Callable[..., WeekRecord]:
    """Factory for WeekRecord objects."""
    return _make_week


@pytest.fixture
def make_day() -> Callable[..., DayEntry]:
    """Factory for DayEntry objects."""
    return _make_day


@pytest.fixture
def week_payload() -> dict:
    """A week in the camelCase JSON shape clients send and Mongo stores."""
    return {
        "id": "66f0c0ffee0000000000abcd",
        "weekOf": "2025-10-06",
        "templateKey": "foundation",
        "templateTitle": "Foundation Push / Pull / Posterior",
        "templateIndex": 0,
        "description": "Balanced push, pull, and posterior chain focus.",
        "status": "active",
        "createdAt": "2025-10-06T08:00:00.000Z",
        "updatedAt": "2025-10-08T12:30:00.000Z",
        "days": [
            {
                "id": "foundation-day1",
                "shortName": "Day 1",
                "name": "Day 1 — Push + Row + Hamstrings",
                "exercises": [
                    {
                        "name": "Leg Press",
                        "target": "8–12 reps",
                        "how": "Feet shoulder-width.",
                        "type": "reps",
                        "sets": [
                            {"set": 1, "weight": "140", "repsOrSec": "12", "rpe": "6", "done": True},
                            {"set": 2, "weight": "150", "repsOrSec": "10", "rpe": "7", "done": False},
                        ],
                    },
                    {
                        "name": "Pallof Press (Cable)",
                        "target": "20–30 sec/side",
                        "how": "Resist twist.",
                        "type": "seconds",
                        "sets": [
                            {"set": 1, "weight": "20", "repsOrSec": "30", "rpe": "", "done": True},
                        ],
                    },
                ],
            }
        ],
    }
