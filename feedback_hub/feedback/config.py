"""Feedback collection configuration.

Controls listing limits. All settings can be overridden via ``FEEDBACK_*``
environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedbackConfig(BaseSettings):
    """Configuration for feedback collections."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_",
        case_sensitive=False,
        extra="ignore",
    )

    default_page_size: int = Field(
        default=50,
        ge=1,
        description="Page size for collection listings when none is given",
    )
    max_page_size: int = Field(
        default=200,
        ge=1,
        description="Upper bound on collection listing page size",
    )
