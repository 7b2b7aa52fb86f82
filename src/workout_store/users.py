"""User accounts: registration and email/password login.

Functions take the ``users`` collection explicitly; ``WorkoutStore`` wires
them to the real database.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from workout_engine.models.week import format_timestamp
from workout_store.auth import HASH_ITERATIONS, hash_password, needs_rehash, verify_password
from workout_store.exceptions import (
    DuplicateAccountError,
    InvalidCredentialsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


@lru_cache(maxsize=1)
def _dummy_credential() -> str:
    """A credential no password matches; verified against for unknown emails."""
    return hash_password(secrets.token_hex(16))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass(frozen=True)
class UserRecord:
    """Public view of a user document (the password hash is never exposed)."""

    id: str
    name: str
    email: str
    created_at: str
    updated_at: str
    last_login_at: str | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> UserRecord:
        last_login = doc.get("lastLoginAt")
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            created_at=format_timestamp(doc.get("createdAt")),
            updated_at=format_timestamp(doc.get("updatedAt")),
            last_login_at=format_timestamp(last_login) if last_login else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "lastLoginAt": self.last_login_at,
        }


def find_user_by_email(collection: Collection, email: str) -> dict[str, Any] | None:
    return collection.find_one({"email": normalize_email(email)})


def register_user(
    collection: Collection,
    name: str,
    email: str,
    password: str,
    now: datetime | None = None,
    iterations: int = HASH_ITERATIONS,
) -> UserRecord:
    """Create an account. Raises ValidationError or DuplicateAccountError."""
    name = _clean(name)
    email = _clean(email)
    password = _clean(password)

    if not name or not email or not password:
        raise ValidationError("Name, email, and password are required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Choose a password with at least {MIN_PASSWORD_LENGTH} characters."
        )

    email_key = normalize_email(email)
    if collection.find_one({"email": email_key}) is not None:
        raise DuplicateAccountError()

    if now is None:
        now = datetime.now(timezone.utc)
    doc: dict[str, Any] = {
        "name": name,
        "email": email_key,
        "passwordHash": hash_password(password, iterations=iterations),
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = collection.insert_one(doc)
    except DuplicateKeyError as exc:
        # Lost a race with a concurrent registration; the unique index caught it.
        raise DuplicateAccountError() from exc

    doc["_id"] = result.inserted_id
    logger.info("Registered user %s", doc["_id"])
    return UserRecord.from_document(doc)


def authenticate_user(
    collection: Collection,
    email: str,
    password: str,
    now: datetime | None = None,
) -> UserRecord:
    """Log a user in. Raises ValidationError or InvalidCredentialsError."""
    email = _clean(email)
    password = _clean(password)
    if not email or not password:
        raise ValidationError("Email and password are required.")

    user = find_user_by_email(collection, email)
    # Unknown emails cost one key derivation, same as known ones.
    stored = user.get("passwordHash", "") if user is not None else _dummy_credential()
    if not verify_password(password, stored) or user is None:
        raise InvalidCredentialsError()

    if now is None:
        now = datetime.now(timezone.utc)
    updates: dict[str, Any] = {"lastLoginAt": now, "updatedAt": now}
    if needs_rehash(user["passwordHash"]):
        updates["passwordHash"] = hash_password(password)
        logger.info("Upgraded password hash for user %s", user["_id"])

    collection.update_one({"_id": user["_id"]}, {"$set": updates})
    logger.info("User %s logged in", user["_id"])
    return UserRecord.from_document({**user, **updates})
