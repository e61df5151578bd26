"""Shared fixtures for API tests."""

import dataclasses
import uuid
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from feedback_hub.api.app import create_app
from feedback_hub.api.auth import AdminAuthGuard
from feedback_hub.api.dependencies import (
    get_admin_guard,
    get_feedback_service,
    get_optional_database,
)
from feedback_hub.feedback.config import FeedbackConfig
from feedback_hub.feedback.schemas import FeedbackCollection, NewCollectionData
from feedback_hub.feedback.service import FeedbackCollectionService

ADMIN_SECRET = "test-admin-secret"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_SECRET}"}


class InMemoryCollectionRepository:
    """Dict-backed stand-in for FeedbackCollectionRepository."""

    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, FeedbackCollection] = {}

    async def find_conflicts(self, name, key, *, exclude_id=None):
        return [
            c
            for c in self.rows.values()
            if c.id != exclude_id
            and ((name is not None and c.name == name) or (key is not None and c.key == key))
        ]

    async def insert(self, data: NewCollectionData, api_key: str) -> FeedbackCollection:
        now = datetime.now(timezone.utc)
        collection = FeedbackCollection(
            id=uuid.uuid4(),
            name=data.name,
            key=data.key,
            description=data.description,
            scale=data.scale,
            metadata=data.metadata,
            api_key=api_key,
            created_at=now,
            updated_at=now,
        )
        self.rows[collection.id] = collection
        return collection

    async def get_by_key(self, key: str):
        for c in self.rows.values():
            if c.key == key:
                return c
        return None

    async def list_collections(self, search=None, limit=50, offset=0):
        matches = sorted(
            (
                c
                for c in self.rows.values()
                if not search
                or search.lower() in c.name.lower()
                or search.lower() in c.key.lower()
            ),
            key=lambda c: c.name,
        )
        return matches[offset:offset + limit], len(matches)

    async def update(self, collection_id: uuid.UUID, changes: dict[str, Any]):
        current = self.rows.get(collection_id)
        if current is None:
            return None
        updated = dataclasses.replace(current, updated_at=datetime.now(timezone.utc), **changes)
        self.rows[collection_id] = updated
        return updated


@pytest.fixture
def repository():
    return InMemoryCollectionRepository()


@pytest.fixture
def feedback_service(repository):
    return FeedbackCollectionService(repository, FeedbackConfig())


@pytest.fixture
def mock_db():
    """Mock database for /health."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def app(feedback_service, mock_db):
    """Application with the service, guard and database overridden."""
    app = create_app()

    app.dependency_overrides[get_feedback_service] = lambda: feedback_service
    app.dependency_overrides[get_admin_guard] = lambda: AdminAuthGuard(ADMIN_SECRET)
    app.dependency_overrides[get_optional_database] = lambda: mock_db

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI TestClient with dependency overrides."""
    with TestClient(app) as c:
        yield c
