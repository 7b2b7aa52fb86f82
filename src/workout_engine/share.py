"""Plain-text week summary for sharing (clipboard, messages)."""

from __future__ import annotations

from collections.abc import Iterable

from workout_engine.models.enums import SHARE_BRAND, SHARE_SIGNATURE, ExerciseType
from workout_engine.models.week import ExerciseEntry, WeekRecord
from workout_engine.progress import count_sets


def _unique(values: Iterable[str]) -> list[str]:
    """Trimmed, non-empty values in first-seen order."""
    seen: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def describe_exercise(exercise: ExerciseEntry) -> str:
    """e.g. ``"Leg Press: wt 140/150 · reps 10 · RPE 6 · 2/2 done"``."""
    parts: list[str] = []
    weights = _unique(s.weight for s in exercise.sets)
    if weights:
        parts.append(f"wt {'/'.join(weights)}")
    reps_or_sec = _unique(s.reps_or_sec for s in exercise.sets)
    if reps_or_sec:
        unit = "sec" if exercise.type is ExerciseType.SECONDS else "reps"
        parts.append(f"{unit} {'/'.join(reps_or_sec)}")
    rpes = _unique(s.rpe for s in exercise.sets)
    if rpes:
        parts.append(f"RPE {'/'.join(rpes)}")
    parts.append(f"{exercise.completed_sets}/{len(exercise.sets)} done")
    return f"{exercise.name}: {' · '.join(parts)}"


def build_week_share_summary(week: WeekRecord) -> str:
    day_counts = [count_sets(day) for day in week.days]
    completed = sum(c for c, _ in day_counts)
    total = sum(t for _, t in day_counts)

    lines = [
        f"{SHARE_BRAND} · Week of {week.week_of}",
        f"{week.template_title} — {week.description}",
        f"Progress: {completed}/{total} sets complete",
        "",
    ]
    for day, (day_completed, day_total) in zip(week.days, day_counts):
        lines.append(f"{day.name}: {day_completed}/{day_total} sets complete")
        for exercise in day.exercises:
            lines.append(f"  • {describe_exercise(exercise)}")
        lines.append("")
    lines.append(SHARE_SIGNATURE)
    return "\n".join(lines).strip()
