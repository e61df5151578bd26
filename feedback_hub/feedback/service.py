"""Feedback collection service: creation and partial updates.

Creation enforces that ``name`` and ``key`` are globally unique and issues
the collection's secret API key. The application-level check runs one
lookup and reports every colliding field at once; the table's unique
constraints remain the authoritative guard against concurrent inserts
(the repository maps their violations to the same ``ValidationError``).
"""

import logging
import secrets

from feedback_hub.common.exceptions import CollectionNotFoundError, ValidationError
from feedback_hub.feedback.config import FeedbackConfig
from feedback_hub.feedback.repository import FeedbackCollectionRepository, taken_message
from feedback_hub.feedback.schemas import (
    CollectionUpdate,
    FeedbackCollection,
    NewCollectionData,
)

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "fx_"
API_KEY_BYTES = 32


def generate_api_key() -> str:
    """Return a new collection API key: ``fx_`` plus 64 lowercase hex characters."""
    return f"{API_KEY_PREFIX}{secrets.token_hex(API_KEY_BYTES)}"


def _collect_conflicts(
    existing: list[FeedbackCollection],
    name: str | None,
    key: str | None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    for collection in existing:
        if name is not None and collection.name == name:
            errors["name"] = taken_message("name", name)
        if key is not None and collection.key == key:
            errors["key"] = taken_message("key", key)
    return errors


class FeedbackCollectionService:
    """Creates and updates feedback collections.

    Args:
        repository: Storage for collections.
        config: Listing limits.
    """

    def __init__(
        self,
        repository: FeedbackCollectionRepository,
        config: FeedbackConfig | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or FeedbackConfig()

    async def create(self, data: NewCollectionData) -> FeedbackCollection:
        """Create a collection with a freshly generated API key.

        Args:
            data: Shape-validated input.

        Returns:
            The persisted collection, including id, timestamps and api_key.

        Raises:
            ValidationError: If ``name`` and/or ``key`` is already taken.
        """
        await self._assert_unique(data.name, data.key)

        created = await self._repo.insert(data, generate_api_key())
        logger.info("Created feedback collection %s (%s)", created.key, created.id)
        return created

    async def get_by_key(self, key: str) -> FeedbackCollection | None:
        """Fetch a collection by key, or None."""
        return await self._repo.get_by_key(key)

    async def list_collections(
        self,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[FeedbackCollection], int]:
        """Paginated listing; ``limit`` is clamped to the configured maximum."""
        page_size = min(limit or self._config.default_page_size, self._config.max_page_size)
        return await self._repo.list_collections(search=search, limit=page_size, offset=offset)

    async def update(self, key: str, update: CollectionUpdate) -> FeedbackCollection:
        """Apply a partial update to the collection identified by ``key``.

        The API key is never regenerated. Renaming to a taken name or key
        fails the same way creation does.

        Raises:
            CollectionNotFoundError: If no collection has this key.
            ValidationError: If a new name or key collides with another collection.
        """
        existing = await self._repo.get_by_key(key)
        if existing is None:
            raise CollectionNotFoundError(key)

        changes = update.changes()
        if not changes:
            return existing

        new_name = changes.get("name")
        new_key = changes.get("key")
        if new_name == existing.name:
            new_name = None
        if new_key == existing.key:
            new_key = None
        await self._assert_unique(new_name, new_key, exclude=existing)

        updated = await self._repo.update(existing.id, changes)
        if updated is None:
            raise CollectionNotFoundError(key)

        logger.info(
            "Updated feedback collection %s (%s): %s",
            updated.key, updated.id, sorted(changes),
        )
        return updated

    async def _assert_unique(
        self,
        name: str | None,
        key: str | None,
        exclude: FeedbackCollection | None = None,
    ) -> None:
        if name is None and key is None:
            return

        existing = await self._repo.find_conflicts(
            name, key, exclude_id=exclude.id if exclude else None
        )
        errors = _collect_conflicts(existing, name, key)
        if errors:
            logger.info("Rejected duplicate collection fields: %s", sorted(errors))
            raise ValidationError(errors)
