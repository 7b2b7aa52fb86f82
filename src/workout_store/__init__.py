"""Workout store — all MongoDB I/O and account handling lives here."""

from workout_store.auth import hash_password, needs_rehash, verify_password
from workout_store.client import WorkoutStore
from workout_store.exceptions import (
    AuthError,
    DatabaseError,
    DuplicateAccountError,
    InvalidCredentialsError,
    ValidationError,
    WeekNotFoundError,
    WorkoutStoreError,
)
from workout_store.users import UserRecord

__all__ = [
    "AuthError",
    "DatabaseError",
    "DuplicateAccountError",
    "InvalidCredentialsError",
    "UserRecord",
    "ValidationError",
    "WeekNotFoundError",
    "WorkoutStore",
    "WorkoutStoreError",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
