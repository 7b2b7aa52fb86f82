"""Tests for workout_store.users — mock collections, no real database."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from workout_store.auth import HASH_ITERATIONS, hash_password, verify_password
from workout_store.exceptions import (
    DuplicateAccountError,
    InvalidCredentialsError,
    ValidationError,
)
from workout_store.users import (
    UserRecord,
    authenticate_user,
    find_user_by_email,
    normalize_email,
    register_user,
)

NOW = datetime(2025, 10, 8, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def stored_user() -> dict:
    return {
        "_id": ObjectId("66f0c0ffee00000000001234"),
        "name": "Sam",
        "email": "sam@example.com",
        "passwordHash": hash_password("long enough pw", iterations=HASH_ITERATIONS),
        "createdAt": datetime(2025, 10, 1, 8, 0),
        "updatedAt": datetime(2025, 10, 1, 8, 0),
    }


class TestNormalizeEmail:
    def test_trims_and_lowercases(self) -> None:
        assert normalize_email("  Sam@Example.COM ") == "sam@example.com"

    def test_lookup_uses_normalized_email(self, users_collection) -> None:
        find_user_by_email(users_collection, " SAM@example.com")
        users_collection.find_one.assert_called_once_with({"email": "sam@example.com"})


# ---------------------------------------------------------------------------
# register_user
# ---------------------------------------------------------------------------


class TestRegisterUser:
    def test_inserts_normalized_document(self, users_collection, fast_iterations) -> None:
        user = register_user(
            users_collection,
            " Sam ",
            " Sam@Example.com ",
            "long enough pw",
            now=NOW,
            iterations=fast_iterations,
        )

        doc = users_collection.insert_one.call_args.args[0]
        assert doc["name"] == "Sam"
        assert doc["email"] == "sam@example.com"
        assert doc["createdAt"] == doc["updatedAt"] == NOW
        assert verify_password("long enough pw", doc["passwordHash"])

        assert isinstance(user, UserRecord)
        assert user.id == str(users_collection.insert_one.return_value.inserted_id)
        assert user.email == "sam@example.com"
        assert user.created_at == "2025-10-08T09:30:00.000Z"
        assert user.last_login_at is None

    def test_public_view_has_no_hash(self, users_collection, fast_iterations) -> None:
        user = register_user(
            users_collection, "Sam", "sam@example.com", "long enough pw", iterations=fast_iterations
        )
        assert "passwordHash" not in user.to_dict()

    @pytest.mark.parametrize(
        ("name", "email", "password"),
        [
            ("", "sam@example.com", "long enough pw"),
            ("Sam", "   ", "long enough pw"),
            ("Sam", "sam@example.com", ""),
            (None, "sam@example.com", "long enough pw"),
        ],
    )
    def test_missing_fields(self, users_collection, name, email, password) -> None:
        with pytest.raises(ValidationError, match="required"):
            register_user(users_collection, name, email, password)
        users_collection.insert_one.assert_not_called()

    def test_short_password(self, users_collection) -> None:
        with pytest.raises(ValidationError, match="at least 8"):
            register_user(users_collection, "Sam", "sam@example.com", "short")
        users_collection.insert_one.assert_not_called()

    def test_existing_email(self, users_collection, stored_user) -> None:
        users_collection.find_one.return_value = stored_user
        with pytest.raises(DuplicateAccountError) as exc_info:
            register_user(users_collection, "Sam", "SAM@example.com", "long enough pw")
        assert exc_info.value.status_code == 409
        users_collection.insert_one.assert_not_called()

    def test_unique_index_race(self, users_collection, fast_iterations) -> None:
        users_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        with pytest.raises(DuplicateAccountError):
            register_user(
                users_collection,
                "Sam",
                "sam@example.com",
                "long enough pw",
                iterations=fast_iterations,
            )


# ---------------------------------------------------------------------------
# authenticate_user
# ---------------------------------------------------------------------------


class TestAuthenticateUser:
    def test_success_records_login(self, users_collection, stored_user) -> None:
        users_collection.find_one.return_value = stored_user

        user = authenticate_user(users_collection, " Sam@Example.com ", "long enough pw", now=NOW)

        assert user.id == str(stored_user["_id"])
        assert user.last_login_at == "2025-10-08T09:30:00.000Z"
        users_collection.update_one.assert_called_once_with(
            {"_id": stored_user["_id"]},
            {"$set": {"lastLoginAt": NOW, "updatedAt": NOW}},
        )

    def test_weak_hash_is_upgraded(self, users_collection, stored_user, fast_iterations) -> None:
        stored_user["passwordHash"] = hash_password("long enough pw", iterations=fast_iterations)
        users_collection.find_one.return_value = stored_user

        with patch("workout_store.users.hash_password", return_value="sha256$new") as rehash:
            authenticate_user(users_collection, "sam@example.com", "long enough pw", now=NOW)

        rehash.assert_called_once_with("long enough pw")
        update = users_collection.update_one.call_args.args[1]["$set"]
        assert update["passwordHash"] == "sha256$new"

    def test_wrong_password(self, users_collection, stored_user) -> None:
        users_collection.find_one.return_value = stored_user
        with pytest.raises(InvalidCredentialsError) as exc_info:
            authenticate_user(users_collection, "sam@example.com", "not the password")
        assert exc_info.value.status_code == 401
        users_collection.update_one.assert_not_called()

    def test_unknown_user_same_error(self, users_collection) -> None:
        with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
            authenticate_user(users_collection, "nobody@example.com", "long enough pw")

    def test_unknown_user_still_derives_key(self, users_collection) -> None:
        with patch(
            "workout_store.users._dummy_credential", return_value="sha256$1000$abcd$ef01"
        ), patch("workout_store.users.verify_password", return_value=False) as verify:
            with pytest.raises(InvalidCredentialsError):
                authenticate_user(users_collection, "nobody@example.com", "long enough pw")
        verify.assert_called_once_with("long enough pw", "sha256$1000$abcd$ef01")

    def test_unknown_user_rejected_even_if_dummy_matches(self, users_collection) -> None:
        with patch("workout_store.users.verify_password", return_value=True):
            with pytest.raises(InvalidCredentialsError):
                authenticate_user(users_collection, "nobody@example.com", "long enough pw")
        users_collection.update_one.assert_not_called()

    def test_malformed_stored_hash(self, users_collection, stored_user) -> None:
        stored_user["passwordHash"] = "garbage"
        users_collection.find_one.return_value = stored_user
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(users_collection, "sam@example.com", "long enough pw")

    def test_missing_fields(self, users_collection) -> None:
        with pytest.raises(ValidationError):
            authenticate_user(users_collection, "", "long enough pw")
        users_collection.find_one.assert_not_called()
