"""
Dependency injection for FastAPI endpoints.
"""

import asyncpg
import structlog
from fastapi import Depends, Request

from feedback_hub.api.auth import AdminAuthGuard
from feedback_hub.config.settings import get_settings
from feedback_hub.feedback.config import FeedbackConfig
from feedback_hub.feedback.repository import FeedbackCollectionRepository
from feedback_hub.feedback.service import FeedbackCollectionService
from feedback_hub.storage.database import Database, close_database
from feedback_hub.storage.database import get_database as _get_global_database

logger = structlog.get_logger(__name__)

# Global config instance (initialized on first request)
_feedback_config: FeedbackConfig | None = None


async def get_database() -> Database:
    """Get the shared, connected database instance."""
    return await _get_global_database()


async def get_optional_database() -> Database | None:
    """Get the shared database, or None when it cannot be reached."""
    try:
        return await _get_global_database()
    except (OSError, asyncpg.PostgresError) as e:
        logger.warning("Database connection failed", error=str(e))
        return None


def get_feedback_config() -> FeedbackConfig:
    """Get the feedback configuration singleton."""
    global _feedback_config

    if _feedback_config is None:
        _feedback_config = FeedbackConfig()

    return _feedback_config


async def get_feedback_repository(
    db: Database = Depends(get_database),
) -> FeedbackCollectionRepository:
    """Get a collection repository bound to the shared database."""
    return FeedbackCollectionRepository(db)


async def get_feedback_service(
    repository: FeedbackCollectionRepository = Depends(get_feedback_repository),
    config: FeedbackConfig = Depends(get_feedback_config),
) -> FeedbackCollectionService:
    """Get the collection service."""
    return FeedbackCollectionService(repository, config)


def get_admin_guard() -> AdminAuthGuard:
    """Build the admin guard from process settings."""
    return AdminAuthGuard(get_settings().admin_secret)


async def require_admin(
    request: Request,
    guard: AdminAuthGuard = Depends(get_admin_guard),
) -> None:
    """Gate an endpoint behind the admin bearer secret."""
    guard.authorize(request)


async def cleanup_dependencies() -> None:
    """Release shared resources on shutdown."""
    global _feedback_config

    _feedback_config = None
    await close_database()
