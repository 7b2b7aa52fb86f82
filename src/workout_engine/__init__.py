"""Pure workout-tracking logic: deduplication, progress, templates."""

from workout_engine.dedup import dedupe_weeks, prefer_candidate
from workout_engine.progress import build_progress

__all__ = [
    "build_progress",
    "dedupe_weeks",
    "prefer_candidate",
]
