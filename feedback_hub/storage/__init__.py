"""Storage layer for PostgreSQL persistence."""

from feedback_hub.storage.database import Database, close_database, get_database

__all__ = ["Database", "get_database", "close_database"]
