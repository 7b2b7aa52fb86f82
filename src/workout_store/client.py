"""High-level workout store facade over MongoDB.

All methods scope their queries to one user and wrap raw pymongo calls with
error handling and retry logic.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import AutoReconnect, PyMongoError

from workout_engine.dedup import dedupe_weeks
from workout_engine.models.enums import DEFAULT_TEMPLATE_INDEX, WeekStatus
from workout_engine.models.progress import ProgressData
from workout_engine.models.week import WeekRecord, parse_days
from workout_engine.progress import build_progress
from workout_engine.templates import (
    WeekTemplate,
    is_valid_template_index,
    next_template_index,
)
from workout_engine.week_builder import create_week, get_monday
from workout_store.exceptions import (
    DatabaseError,
    ValidationError,
    WeekNotFoundError,
    WorkoutStoreError,
)
from workout_store.users import (
    UserRecord,
    authenticate_user,
    find_user_by_email,
    register_user,
)

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "workout"
_MAX_RETRIES = 3
_BASE_BACKOFF_S = 0.5


def _object_id(week_id: str) -> ObjectId:
    try:
        return ObjectId(week_id)
    except (InvalidId, TypeError) as exc:
        raise WeekNotFoundError() from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutStore:
    """Facade for user, week and progress operations."""

    def __init__(
        self,
        database: Database,
        templates: tuple[WeekTemplate, ...] | None = None,
    ) -> None:
        self._db = database
        self._templates = templates

    @classmethod
    def from_uri(
        cls,
        uri: str,
        db_name: str = DEFAULT_DB_NAME,
        templates: tuple[WeekTemplate, ...] | None = None,
        **client_kwargs: Any,
    ) -> "WorkoutStore":
        """Connect to MongoDB at *uri* and use database *db_name*."""
        if not uri:
            raise WorkoutStoreError("Missing MONGODB_URI environment variable")
        client: MongoClient = MongoClient(uri, **client_kwargs)
        logger.info("Using MongoDB database %r", db_name)
        return cls(client[db_name], templates=templates)

    @property
    def users(self):
        return self._db["users"]

    @property
    def weeks(self):
        return self._db["weeks"]

    def ensure_indexes(self) -> None:
        """Create the unique email index and the per-user week index."""
        self._safe_call(self.users.create_index, "email", unique=True)
        self._safe_call(
            self.weeks.create_index,
            [("userId", 1), ("status", 1), ("createdAt", DESCENDING)],
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> UserRecord:
        return self._safe_call(
            register_user, self.users, name, email, password, retry=False
        )

    def login(self, email: str, password: str) -> UserRecord:
        return self._safe_call(authenticate_user, self.users, email, password)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        doc = self._safe_call(find_user_by_email, self.users, email)
        return UserRecord.from_document(doc) if doc else None

    # ------------------------------------------------------------------
    # Weeks
    # ------------------------------------------------------------------

    def get_active_week(self, user_id: str) -> WeekRecord:
        """Return the user's newest active week, creating one if none exists."""
        doc = self._safe_call(
            self.weeks.find_one,
            {"userId": user_id, "status": WeekStatus.ACTIVE.value},
            sort=[("createdAt", DESCENDING)],
        )
        if doc is not None:
            return WeekRecord.from_document(doc)

        fresh = create_week(
            DEFAULT_TEMPLATE_INDEX,
            week_of=get_monday(),
            templates=self._templates,
            user_id=user_id,
        )
        result = self._safe_call(self.weeks.insert_one, fresh, retry=False)
        fresh["_id"] = result.inserted_id
        logger.info("Created first week %s for user %s", result.inserted_id, user_id)
        return WeekRecord.from_document(fresh)

    def save_week(self, user_id: str, week_id: str, days: Any) -> None:
        """Replace the logged days of an active week."""
        parsed = self._parse_days(days)
        result = self._safe_call(
            self.weeks.update_one,
            {"_id": _object_id(week_id), "userId": user_id, "status": WeekStatus.ACTIVE.value},
            {"$set": {"days": [d.to_dict() for d in parsed], "updatedAt": _now()}},
        )
        if result.matched_count == 0:
            raise WeekNotFoundError()
        logger.debug("Saved week %s", week_id)

    def start_new_week(
        self,
        user_id: str,
        week_id: str,
        days: Any,
        template_index: int | None = None,
    ) -> WeekRecord:
        """Archive the active week with its final *days* and start the next one.

        The next week uses *template_index* when given, otherwise the
        template after the archived week's.
        """
        parsed = self._parse_days(days)
        if template_index is not None and not is_valid_template_index(
            template_index, self._templates
        ):
            raise ValidationError("Invalid template")

        object_id = _object_id(week_id)
        existing = self._safe_call(
            self.weeks.find_one,
            {"_id": object_id, "userId": user_id, "status": WeekStatus.ACTIVE.value},
        )
        if existing is None:
            raise WeekNotFoundError()

        now = _now()
        self._safe_call(
            self.weeks.update_one,
            {"_id": object_id},
            {
                "$set": {
                    "days": [d.to_dict() for d in parsed],
                    "status": WeekStatus.ARCHIVED.value,
                    "archivedAt": now,
                    "updatedAt": now,
                }
            },
        )

        if template_index is None:
            template_index = next_template_index(
                int(existing.get("templateIndex") or 0), self._templates
            )
        fresh = create_week(
            template_index,
            week_of=get_monday(),
            now=now,
            templates=self._templates,
            user_id=user_id,
        )
        result = self._safe_call(self.weeks.insert_one, fresh, retry=False)
        fresh["_id"] = result.inserted_id
        logger.info(
            "Archived week %s and started %s (template %d)",
            week_id,
            result.inserted_id,
            template_index,
        )
        return WeekRecord.from_document(fresh)

    def list_weeks(self, user_id: str, limit: int | None = None) -> list[WeekRecord]:
        """All of the user's weeks, one per ``weekOf``, most recently updated first."""
        docs = self._safe_call(self._find_weeks, user_id, limit)
        records = []
        for doc in docs:
            try:
                records.append(WeekRecord.from_document(doc))
            except (ValueError, TypeError) as exc:
                logger.warning("Skipping malformed week %s: %s", doc.get("_id"), exc)
        return dedupe_weeks(records)

    def get_progress(self, user_id: str) -> ProgressData:
        return build_progress(self.list_weeks(user_id))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_weeks(self, user_id: str, limit: int | None) -> list[dict]:
        cursor = self.weeks.find(
            {"userId": user_id},
            sort=[("createdAt", DESCENDING)],
            limit=limit or 0,
        )
        return list(cursor)

    @staticmethod
    def _parse_days(days: Any):
        try:
            return parse_days(days)
        except (ValueError, TypeError) as exc:
            raise ValidationError(f"Invalid payload: {exc}") from exc

    def _safe_call(
        self, fn: Callable, *args: Any, retry: bool = True, **kwargs: Any
    ) -> Any:
        """Call *fn*, retrying AutoReconnect with exponential backoff.

        With ``retry=False`` the call is issued once; inserts use this so a
        write whose acknowledgement was lost is never repeated.
        """
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                return fn(*args, **kwargs)
            except AutoReconnect as exc:
                if not retry:
                    raise DatabaseError(str(exc)) from exc
                last_exc = exc
                wait = _BASE_BACKOFF_S * (2 ** attempt)
                logger.warning(
                    "MongoDB connection lost (attempt %d/%d), retrying in %.1fs",
                    attempt + 1,
                    _MAX_RETRIES,
                    wait,
                )
                time.sleep(wait)
            except PyMongoError as exc:
                raise DatabaseError(str(exc)) from exc

        raise DatabaseError(f"MongoDB unavailable after {_MAX_RETRIES} retries: {last_exc}")
