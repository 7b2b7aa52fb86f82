"""Data models for the workout engine."""

from workout_engine.models.enums import ExerciseType, WeekStatus
from workout_engine.models.progress import (
    ProgressData,
    ProgressDay,
    ProgressDayAverage,
    ProgressTotals,
    ProgressWeek,
)
from workout_engine.models.week import (
    DayEntry,
    ExerciseEntry,
    SetEntry,
    WeekRecord,
    parse_days,
)

__all__ = [
    "DayEntry",
    "ExerciseEntry",
    "ExerciseType",
    "ProgressData",
    "ProgressDay",
    "ProgressDayAverage",
    "ProgressTotals",
    "ProgressWeek",
    "SetEntry",
    "WeekRecord",
    "WeekStatus",
    "parse_days",
]
