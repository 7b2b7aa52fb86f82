"""Progress aggregation: turn stored weeks into dashboard statistics.

Counts roll up bottom-up (exercise -> day -> week -> totals). Every ratio
guards its denominator, so degenerate input yields zeros rather than NaN
or an exception. Output depends on the input alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from workout_engine.dedup import parse_timestamp
from workout_engine.models.progress import (
    ProgressData,
    ProgressDay,
    ProgressDayAverage,
    ProgressTotals,
    ProgressWeek,
)
from workout_engine.models.week import DayEntry, WeekRecord

_DATE_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


def completion_rate(completed: int, total: int) -> float:
    """Completed / total, or 0.0 when there is nothing to complete."""
    if total <= 0:
        return 0.0
    return completed / total


def count_sets(day: DayEntry) -> tuple[int, int]:
    """Return ``(completed, total)`` set counts for one day."""
    completed = 0
    total = 0
    for exercise in day.exercises:
        completed += exercise.completed_sets
        total += len(exercise.sets)
    return completed, total


def format_week_label(week_of: str) -> tuple[str, str]:
    """Short and long labels, e.g. ``("Oct 6", "Week of Oct 6, 2025")``.

    Falls back to the raw string when *week_of* is not a date.
    """
    parsed = parse_timestamp(week_of)
    if parsed is None:
        return week_of, f"Week of {week_of}"
    d = parsed.date()
    return f"{d:%b} {d.day}", f"Week of {d:%b} {d.day}, {d.year}"


def _week_of_key(week_of: str) -> tuple[bool, datetime]:
    parsed = parse_timestamp(week_of)
    return parsed is not None, parsed or _DATE_FLOOR


def summarize_week(week: WeekRecord) -> ProgressWeek:
    days = []
    for day in week.days:
        completed, total = count_sets(day)
        days.append(
            ProgressDay(
                id=day.id,
                name=day.name,
                short_name=day.short_name,
                completed=completed,
                total=total,
            )
        )
    completed = sum(d.completed for d in days)
    total = sum(d.total for d in days)
    label, long_label = format_week_label(week.week_of)
    return ProgressWeek(
        id=week.id,
        week_of=week.week_of,
        label=label,
        long_label=long_label,
        updated_at=week.updated_at,
        template_title=week.template_title,
        status=week.status,
        completed=completed,
        total=total,
        completion_rate=completion_rate(completed, total),
        days=tuple(days),
    )


def current_streak(weeks: Sequence[ProgressWeek]) -> int:
    """Count trailing weeks (oldest -> newest input) with any completed set."""
    streak = 0
    for week in reversed(weeks):
        if week.completed <= 0:
            break
        streak += 1
    return streak


def _day_averages(weeks: Sequence[ProgressWeek]) -> tuple[ProgressDayAverage, ...]:
    # Bucket by position AND name: a differently named day in the same
    # slot of another template is a different bucket.
    buckets: dict[str, list] = {}
    for week in weeks:
        for index, day in enumerate(week.days):
            key = f"{index}-{day.name}"
            bucket = buckets.setdefault(key, [day.name, 0, 0, index])
            bucket[1] += day.completed
            bucket[2] += day.total

    averages = [
        ProgressDayAverage(
            key=key,
            label=label,
            completed=completed,
            total=total,
            completion_rate=completion_rate(completed, total),
            index=index,
        )
        for key, (label, completed, total, index) in buckets.items()
    ]
    averages.sort(key=lambda a: a.index)
    return tuple(averages)


def build_progress(weeks: Iterable[WeekRecord]) -> ProgressData:
    """Compute dashboard statistics for already-deduplicated weeks.

    Weeks are ordered chronologically by ``week_of`` (unparsable dates
    first). The highlight week has the best completion rate, ties going to
    the later week; the streak counts back from the latest week until one
    with no completed sets.
    """
    chronological = sorted(weeks, key=lambda w: _week_of_key(w.week_of))
    if not chronological:
        return ProgressData()

    progress_weeks = tuple(summarize_week(w) for w in chronological)

    completed = sum(w.completed for w in progress_weeks)
    total = sum(w.total for w in progress_weeks)
    totals = ProgressTotals(
        completed=completed,
        total=total,
        week_count=len(progress_weeks),
        day_count=sum(1 for w in progress_weeks for d in w.days if d.completed > 0),
        average_completion=completion_rate(completed, total),
    )

    highlight = max(
        progress_weeks,
        key=lambda w: (w.completion_rate, _week_of_key(w.week_of)),
    )

    return ProgressData(
        weeks=progress_weeks,
        totals=totals,
        day_averages=_day_averages(progress_weeks),
        highlight_week_id=highlight.id,
        latest_week_id=progress_weeks[-1].id,
        current_streak=current_streak(progress_weeks),
    )
