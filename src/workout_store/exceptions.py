"""Custom exception hierarchy for the workout store."""

from __future__ import annotations


class WorkoutStoreError(Exception):
    """Base exception for all workout_store errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(WorkoutStoreError):
    """The caller supplied a missing or malformed value."""

    status_code = 400


class AuthError(WorkoutStoreError):
    """Authentication failed."""

    status_code = 401


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    def __init__(self, message: str = "Invalid email or password.") -> None:
        super().__init__(message)


class DuplicateAccountError(WorkoutStoreError):
    """An account already exists for the email address."""

    status_code = 409

    def __init__(self, message: str = "An account with that email already exists.") -> None:
        super().__init__(message)


class WeekNotFoundError(WorkoutStoreError):
    """No active week with that id belongs to the user."""

    status_code = 404

    def __init__(self, message: str = "Week not found") -> None:
        super().__init__(message)


class DatabaseError(WorkoutStoreError):
    """A MongoDB operation failed."""
