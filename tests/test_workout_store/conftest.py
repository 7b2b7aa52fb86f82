"""Fixtures for workout_store tests: mocked pymongo collections and documents."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

# Keep key derivation fast in tests; production uses HASH_ITERATIONS.
FAST_ITERATIONS = 1_000


@pytest.fixture
def fast_iterations() -> int:
    return FAST_ITERATIONS


@pytest.fixture
def users_collection() -> MagicMock:
    """Mock ``users`` collection with no matching documents by default."""
    collection = MagicMock()
    collection.find_one.return_value = None
    collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
    return collection


@pytest.fixture
def stored_week_doc() -> dict:
    """An active week document as pymongo returns it (naive UTC datetimes)."""
    return {
        "_id": ObjectId("66f0c0ffee0000000000abcd"),
        "userId": "user-1",
        "weekOf": "2025-10-06",
        "templateKey": "foundation",
        "templateTitle": "Foundation Push / Pull / Posterior",
        "templateIndex": 0,
        "description": "Balanced push, pull, and posterior chain focus.",
        "status": "active",
        "createdAt": datetime(2025, 10, 6, 8, 0),
        "updatedAt": datetime(2025, 10, 8, 12, 0),
        "days": [
            {
                "id": "foundation-day1",
                "shortName": "Day 1",
                "name": "Day 1 — Push + Row + Hamstrings",
                "exercises": [
                    {
                        "name": "Leg Press",
                        "target": "8–12 reps",
                        "how": "Feet shoulder-width.",
                        "type": "reps",
                        "sets": [
                            {"set": 1, "weight": "140", "repsOrSec": "12", "rpe": "6", "done": True},
                            {"set": 2, "weight": "", "repsOrSec": "", "rpe": "", "done": False},
                        ],
                    }
                ],
            }
        ],
    }
