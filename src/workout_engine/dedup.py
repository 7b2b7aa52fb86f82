"""Collapse week records that share a calendar start date.

Concurrent "start new week" requests or retried writes can leave two
records with the same ``week_of``. Views must show exactly one, chosen
deterministically:

1. An active record beats an archived one.
2. Otherwise the later ``updated_at`` wins.
3. Then the later ``created_at`` wins.
4. Otherwise the record seen last wins.

Timestamps that fail to parse are non-comparable and the step is skipped.
All functions are pure.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from workout_engine.models.week import WeekRecord

_EPOCH_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp or date; ``None`` if it cannot be parsed.

    A trailing ``Z`` is accepted and naive values are taken as UTC so that
    every parsed result is comparable with every other.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _compare(left: datetime | None, right: datetime | None) -> int | None:
    if left is None or right is None:
        return None
    return (left > right) - (left < right)


def prefer_candidate(best: WeekRecord, candidate: WeekRecord) -> bool:
    """Return True if *candidate* should replace *best* for the same week."""
    if best.is_archived != candidate.is_archived:
        return best.is_archived

    order = _compare(parse_timestamp(candidate.updated_at), parse_timestamp(best.updated_at))
    if order:
        return order > 0

    order = _compare(parse_timestamp(candidate.created_at), parse_timestamp(best.created_at))
    if order:
        return order > 0

    return True


def _recency_key(week: WeekRecord) -> tuple:
    updated = parse_timestamp(week.updated_at)
    created = parse_timestamp(week.created_at)
    return (
        updated is not None,
        updated or _EPOCH_FLOOR,
        created is not None,
        created or _EPOCH_FLOOR,
        week.week_of,
    )


def dedupe_weeks(weeks: Iterable[WeekRecord]) -> list[WeekRecord]:
    """Keep one canonical record per ``week_of``, newest first.

    Output is ordered by ``updated_at`` descending, then ``created_at``
    descending, then ``week_of`` descending; records with unparsable
    timestamps sort after the rest. Running the result through again
    returns it unchanged.
    """
    canonical: dict[str, WeekRecord] = {}
    for week in weeks:
        best = canonical.get(week.week_of)
        if best is None or prefer_candidate(best, week):
            canonical[week.week_of] = week
    return sorted(canonical.values(), key=_recency_key, reverse=True)
