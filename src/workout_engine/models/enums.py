"""Enumerations and shared constants for the workout engine."""

from enum import Enum


class WeekStatus(str, Enum):
    """Lifecycle state of a stored week.

    Only one week per user is ACTIVE (editable) at a time; starting a new
    week moves the previous one to ARCHIVED.
    """

    ACTIVE = "active"
    ARCHIVED = "archived"


class ExerciseType(str, Enum):
    """What the ``repsOrSec`` field of a set measures."""

    REPS = "reps"
    SECONDS = "seconds"


# ---------------------------------------------------------------------------
# Week construction
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE_INDEX = 0

# ---------------------------------------------------------------------------
# Share summary
# ---------------------------------------------------------------------------

SHARE_BRAND = "Fitmotion"
SHARE_SIGNATURE = "Shared from Fitmotion Trainer"
