"""Shared fixtures for feedback tests."""

from unittest.mock import AsyncMock

import pytest

from feedback_hub.feedback.schemas import scale_to_dict


def make_row(collection) -> dict:
    """Build the record dict the database would return for ``collection``."""
    return {
        "id": collection.id,
        "name": collection.name,
        "key": collection.key,
        "description": collection.description,
        "scale": scale_to_dict(collection.scale),
        "metadata": collection.metadata,
        "api_key": collection.api_key,
        "created_at": collection.created_at,
        "updated_at": collection.updated_at,
    }


@pytest.fixture
def mock_database():
    """Mock Database with async fetch methods."""
    db = AsyncMock()
    db.execute = AsyncMock()
    db.fetchrow = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock()
    return db


@pytest.fixture
def numeric_row(numeric_collection) -> dict:
    return make_row(numeric_collection)


@pytest.fixture
def enum_row(enum_collection) -> dict:
    return make_row(enum_collection)
