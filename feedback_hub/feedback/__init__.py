"""Feedback collections: named, keyed scoring configurations.

Components:
- FeedbackCollection: Dataclass mapping to the feedback_collections table
- NumericScale / EnumScale: The two scale variants, tagged by ScaleType
- FeedbackConfig: Pydantic settings for listing limits
- FeedbackCollectionRepository: SQL persistence
- FeedbackCollectionService: Create/update workflow with uniqueness checks
"""

from feedback_hub.feedback.config import FeedbackConfig
from feedback_hub.feedback.repository import FeedbackCollectionRepository
from feedback_hub.feedback.schemas import (
    CollectionUpdate,
    EnumScale,
    FeedbackCollection,
    NewCollectionData,
    NumericScale,
    Scale,
    ScaleType,
)
from feedback_hub.feedback.service import FeedbackCollectionService, generate_api_key

__all__ = [
    "CollectionUpdate",
    "EnumScale",
    "FeedbackCollection",
    "FeedbackCollectionRepository",
    "FeedbackCollectionService",
    "FeedbackConfig",
    "NewCollectionData",
    "NumericScale",
    "Scale",
    "ScaleType",
    "generate_api_key",
]
