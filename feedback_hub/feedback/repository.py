"""Feedback collection repository for CRUD operations.

Uses hand-written SQL over asyncpg. JSON columns (``scale``, ``metadata``)
are encoded and decoded by the codecs registered in ``Database``.
"""

import logging
import uuid
from typing import Any

import asyncpg

from feedback_hub.common.exceptions import ValidationError
from feedback_hub.feedback.schemas import (
    FeedbackCollection,
    NewCollectionData,
    scale_from_dict,
    scale_to_dict,
)
from feedback_hub.storage.database import Database

logger = logging.getLogger(__name__)

NAME_CONSTRAINT = "uq_feedback_collections_name"
KEY_CONSTRAINT = "uq_feedback_collections_key"

_CREATE_TABLE_SQL = f"""
CREATE EXTENSION IF NOT EXISTS "uuid-ossp";

CREATE TABLE IF NOT EXISTS feedback_collections (
    id           UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    name         VARCHAR(63) NOT NULL,
    key          VARCHAR(64) NOT NULL,
    description  VARCHAR(255),
    scale        JSONB NOT NULL,
    metadata     JSONB,
    api_key      TEXT NOT NULL,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at   TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT {NAME_CONSTRAINT} UNIQUE (name),
    CONSTRAINT {KEY_CONSTRAINT} UNIQUE (key)
);
"""

_INSERT_SQL = """
INSERT INTO feedback_collections (name, key, description, scale, metadata, api_key)
VALUES ($1, $2, $3, $4, $5, $6)
RETURNING *
"""

# Columns a partial update may touch; api_key is never among them.
_UPDATABLE_COLUMNS = ("name", "key", "description", "scale", "metadata")


def taken_message(field: str, value: str) -> str:
    """Message reported when a unique field is already in use."""
    return f'Feedback collection {field} "{value}" already taken'


def _record_to_collection(record: Any) -> FeedbackCollection:
    """Convert an asyncpg Record to a FeedbackCollection."""
    return FeedbackCollection(
        id=record["id"],
        name=record["name"],
        key=record["key"],
        description=record["description"],
        scale=scale_from_dict(record["scale"]),
        metadata=record["metadata"],
        api_key=record["api_key"],
        created_at=record["created_at"],
        updated_at=record["updated_at"],
    )


def _unique_violation_to_validation_error(
    exc: asyncpg.UniqueViolationError,
    name: str | None,
    key: str | None,
) -> ValidationError | None:
    """Map a store-level unique violation to the field error it represents."""
    constraint = getattr(exc, "constraint_name", None)
    if constraint == NAME_CONSTRAINT and name is not None:
        return ValidationError({"name": taken_message("name", name)})
    if constraint == KEY_CONSTRAINT and key is not None:
        return ValidationError({"key": taken_message("key", key)})
    return None


class FeedbackCollectionRepository:
    """Repository for feedback collection persistence and querying."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the feedback_collections table (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Feedback collections table ensured")

    async def find_conflicts(
        self,
        name: str | None,
        key: str | None,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> list[FeedbackCollection]:
        """Fetch every collection whose name or key matches, in one query.

        Args:
            name: Name to look for (``None`` skips the name condition).
            key: Key to look for (``None`` skips the key condition).
            exclude_id: Row to ignore, used when updating that row.

        Returns:
            All matching collections, possibly two distinct rows.
        """
        conditions: list[str] = []
        params: list[Any] = []
        idx = 1

        if name is not None:
            conditions.append(f"name = ${idx}")
            params.append(name)
            idx += 1
        if key is not None:
            conditions.append(f"key = ${idx}")
            params.append(key)
            idx += 1

        if not conditions:
            return []

        where_clause = "(" + " OR ".join(conditions) + ")"
        if exclude_id is not None:
            where_clause += f" AND id <> ${idx}"
            params.append(exclude_id)

        rows = await self._db.fetch(
            f"SELECT * FROM feedback_collections WHERE {where_clause} ORDER BY created_at",
            *params,
        )
        return [_record_to_collection(r) for r in rows]

    async def insert(self, data: NewCollectionData, api_key: str) -> FeedbackCollection:
        """Insert a new collection.

        Raises:
            ValidationError: If the store rejects the row on a unique constraint.
        """
        try:
            row = await self._db.fetchrow(
                _INSERT_SQL,
                data.name,
                data.key,
                data.description,
                scale_to_dict(data.scale),
                data.metadata,
                api_key,
            )
        except asyncpg.UniqueViolationError as exc:
            mapped = _unique_violation_to_validation_error(exc, data.name, data.key)
            if mapped is None:
                raise
            logger.info("Insert rejected by unique constraint %s", exc.constraint_name)
            raise mapped from exc
        return _record_to_collection(row)

    async def get_by_key(self, key: str) -> FeedbackCollection | None:
        """Fetch a single collection by its key."""
        row = await self._db.fetchrow(
            "SELECT * FROM feedback_collections WHERE key = $1",
            key,
        )
        return _record_to_collection(row) if row else None

    async def list_collections(
        self,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[FeedbackCollection], int]:
        """Paginated list ordered by name. Returns (collections, total)."""
        conditions: list[str] = []
        params: list[Any] = []
        idx = 1

        if search:
            conditions.append(f"(name ILIKE ${idx} OR key ILIKE ${idx})")
            params.append(f"%{search}%")
            idx += 1

        where_clause = " WHERE " + " AND ".join(conditions) if conditions else ""

        total = await self._db.fetchval(
            f"SELECT COUNT(*) FROM feedback_collections{where_clause}",
            *params,
        )

        data_sql = f"""
            SELECT * FROM feedback_collections{where_clause}
            ORDER BY name
            LIMIT ${idx} OFFSET ${idx + 1}
        """
        params.extend([limit, offset])
        rows = await self._db.fetch(data_sql, *params)

        return [_record_to_collection(r) for r in rows], total or 0

    async def update(
        self,
        collection_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> FeedbackCollection | None:
        """Apply a partial update and bump ``updated_at``.

        Args:
            collection_id: Row to update.
            changes: Column name to new value; unknown columns are rejected.

        Returns:
            The updated collection, or None if the row no longer exists.

        Raises:
            ValidationError: If the store rejects a new name or key.
        """
        unknown = set(changes) - set(_UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")

        assignments: list[str] = []
        params: list[Any] = []
        idx = 1
        for column in _UPDATABLE_COLUMNS:
            if column not in changes:
                continue
            value = changes[column]
            if column == "scale":
                value = scale_to_dict(value)
            assignments.append(f"{column} = ${idx}")
            params.append(value)
            idx += 1

        assignments.append("updated_at = NOW()")
        params.append(collection_id)

        sql = f"""
            UPDATE feedback_collections SET {", ".join(assignments)}
            WHERE id = ${idx}
            RETURNING *
        """
        try:
            row = await self._db.fetchrow(sql, *params)
        except asyncpg.UniqueViolationError as exc:
            mapped = _unique_violation_to_validation_error(
                exc, changes.get("name"), changes.get("key")
            )
            if mapped is None:
                raise
            raise mapped from exc
        return _record_to_collection(row) if row else None
