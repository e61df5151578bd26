"""
Request and response models for the feedback-hub API.

Wire field names are camelCase (``apiKey``, ``createdAt``, ``statusCode``);
request bodies also accept the snake_case names.
"""

import datetime as dt
import uuid
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FiniteFloat,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel

from feedback_hub.feedback.schemas import (
    DESCRIPTION_MAX_LENGTH,
    KEY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    EnumScale,
    FeedbackCollection,
    NumericScale,
    Scale,
)

KEY_PATTERN = r"^[A-Za-z0-9_-]+$"


class APIModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Scale models


class NumericScaleModel(APIModel):
    """Inclusive numeric range, e.g. min=1, max=5 for a 5-star rating."""

    type: Literal["numeric"] = Field(..., description="Scale discriminator")
    min: int | FiniteFloat = Field(..., description="Minimum allowed value (inclusive)")
    max: int | FiniteFloat = Field(..., description="Maximum allowed value (inclusive)")

    @model_validator(mode="after")
    def _check_range(self) -> "NumericScaleModel":
        if self.min > self.max:
            raise ValueError("min must be less than or equal to max")
        return self

    def to_domain(self) -> NumericScale:
        return NumericScale(min=self.min, max=self.max)


class EnumScaleModel(APIModel):
    """Enumerated labels, e.g. ["negative", "neutral", "positive"]."""

    type: Literal["enum"] = Field(..., description="Scale discriminator")
    values: list[Annotated[str, StringConstraints(min_length=1)]] = Field(
        ...,
        min_length=1,
        description="Allowed string values (intended to be unique)",
    )

    def to_domain(self) -> EnumScale:
        return EnumScale(values=tuple(self.values))


ScaleModel = Annotated[
    NumericScaleModel | EnumScaleModel,
    Field(discriminator="type"),
]


def scale_to_model(scale: Scale) -> NumericScaleModel | EnumScaleModel:
    """Convert a domain scale to its API model."""
    if isinstance(scale, NumericScale):
        return NumericScaleModel(type="numeric", min=scale.min, max=scale.max)
    if isinstance(scale, EnumScale):
        return EnumScaleModel(type="enum", values=list(scale.values))
    raise TypeError(f"Unsupported scale {scale!r}")


# Feedback collection models


NameStr = Annotated[str, StringConstraints(min_length=1, max_length=NAME_MAX_LENGTH)]
KeyStr = Annotated[
    str,
    StringConstraints(min_length=1, max_length=KEY_MAX_LENGTH, pattern=KEY_PATTERN),
]
DescriptionStr = Annotated[str, StringConstraints(max_length=DESCRIPTION_MAX_LENGTH)]


class CreateFeedbackCollectionRequest(APIModel):
    """Request model for creating a feedback collection."""

    name: NameStr = Field(
        ...,
        description="Human-readable name, unique across all collections (max 63 chars)",
        examples=["Customer Satisfaction"],
    )
    key: KeyStr = Field(
        ...,
        description="URL-safe slug, unique across all collections (max 64 chars)",
        examples=["customer-satisfaction"],
    )
    description: DescriptionStr | None = Field(
        default=None,
        description="Optional description for administration (max 255 chars)",
    )
    scale: ScaleModel = Field(
        ...,
        description="Scoring scale: numeric range or enumerated values",
    )
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Optional metadata schema; structure only, semantics not enforced",
    )


class UpdateFeedbackCollectionRequest(APIModel):
    """Partial update; omitted fields are left unchanged."""

    name: NameStr | None = Field(default=None, description="New unique name")
    key: KeyStr | None = Field(default=None, description="New unique key")
    description: DescriptionStr | None = Field(default=None, description="New description")
    scale: ScaleModel | None = Field(default=None, description="New scoring scale")
    metadata: dict[str, Any] | None = Field(default=None, description="New metadata schema")


class FeedbackCollectionItem(APIModel):
    """A feedback collection as exposed by read endpoints (no API key)."""

    id: uuid.UUID = Field(..., description="Store-generated identifier")
    name: str = Field(..., description="Unique name")
    key: str = Field(..., description="Unique URL-safe key")
    description: str | None = Field(default=None, description="Description")
    scale: ScaleModel = Field(..., description="Scoring scale")
    metadata: dict[str, Any] | None = Field(default=None, description="Metadata schema")
    created_at: dt.datetime | None = Field(default=None, description="Creation timestamp")
    updated_at: dt.datetime | None = Field(default=None, description="Last update timestamp")

    @classmethod
    def from_collection(cls, collection: FeedbackCollection, **extra: Any) -> "FeedbackCollectionItem":
        return cls(
            id=collection.id,
            name=collection.name,
            key=collection.key,
            description=collection.description,
            scale=scale_to_model(collection.scale),
            metadata=collection.metadata,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
            **extra,
        )


class FeedbackCollectionDetail(FeedbackCollectionItem):
    """Creation response: the collection plus its secret API key."""

    api_key: str = Field(
        ...,
        description="Secret credential for submitting items; returned only once",
    )

    @classmethod
    def from_collection(cls, collection: FeedbackCollection, **extra: Any) -> "FeedbackCollectionDetail":
        return super().from_collection(collection, api_key=collection.api_key, **extra)


class FeedbackCollectionListResponse(APIModel):
    """Paginated list of collections."""

    items: list[FeedbackCollectionItem] = Field(..., description="Collections on this page")
    total: int = Field(..., description="Total matching collections")
    has_more: bool = Field(..., description="Whether more pages exist")


# Errors and health


class ErrorResponse(APIModel):
    """Normalized error body returned by every failing request."""

    error: str = Field(..., description="Error message")
    status_code: int = Field(..., description="HTTP status code")
    issues: dict[str, list[str]] | None = Field(
        default=None,
        description="Field-level messages, present only for validation failures",
    )


class HealthResponse(APIModel):
    """Response model for health check."""

    status: str = Field(..., description="Overall service status: healthy or unhealthy")
    database: str = Field(..., description="Database status: healthy or unhealthy")
    latency_ms: float = Field(..., description="Database round-trip latency in milliseconds")
    admin_auth_configured: bool = Field(
        ...,
        description="Whether ADMIN_SECRET is set",
    )
    version: str = Field(..., description="Service version")
