"""Schema definitions for feedback collections.

Maps 1:1 to the ``feedback_collections`` database table. A collection is a
named, keyed configuration describing how feedback items are scored: either
a numeric range or an enumerated set of labels.
"""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NAME_MAX_LENGTH = 63
KEY_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 255


class ScaleType(str, enum.Enum):
    """Discriminator for the scale variants."""

    NUMERIC = "numeric"
    ENUM = "enum"


@dataclass(frozen=True)
class NumericScale:
    """Inclusive numeric range, e.g. 0-10 for NPS."""

    min: float
    max: float

    @property
    def type(self) -> ScaleType:
        return ScaleType.NUMERIC


@dataclass(frozen=True)
class EnumScale:
    """Enumerated set of allowed string labels."""

    values: tuple[str, ...]

    @property
    def type(self) -> ScaleType:
        return ScaleType.ENUM


Scale = NumericScale | EnumScale


def scale_to_dict(scale: Scale) -> dict[str, Any]:
    """Serialize a scale to its stored JSON form."""
    if isinstance(scale, NumericScale):
        return {"type": ScaleType.NUMERIC.value, "min": scale.min, "max": scale.max}
    if isinstance(scale, EnumScale):
        return {"type": ScaleType.ENUM.value, "values": list(scale.values)}
    raise TypeError(f"Unsupported scale {scale!r}")


def scale_from_dict(data: dict[str, Any]) -> Scale:
    """Parse the stored JSON form of a scale.

    Raises:
        ValueError: If the ``type`` tag is missing or unknown.
    """
    try:
        scale_type = ScaleType(data.get("type"))
    except ValueError:
        raise ValueError(
            f"Invalid scale type {data.get('type')!r}. "
            f"Must be one of: {[t.value for t in ScaleType]}"
        ) from None

    if scale_type is ScaleType.NUMERIC:
        return NumericScale(min=data["min"], max=data["max"])
    if scale_type is ScaleType.ENUM:
        return EnumScale(values=tuple(data["values"]))
    raise ValueError(f"Unhandled scale type {scale_type!r}")


@dataclass
class NewCollectionData:
    """Input for creating a collection, already shape-validated by the caller."""

    name: str
    key: str
    scale: Scale
    description: str | None = None
    metadata: dict[str, Any] | None = None


@dataclass
class CollectionUpdate:
    """Partial update. ``None`` means "leave unchanged".

    The API key is deliberately absent: it is issued once at creation.
    """

    name: str | None = None
    key: str | None = None
    description: str | None = None
    scale: Scale | None = None
    metadata: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were set."""
        return {
            name: value
            for name, value in (
                ("name", self.name),
                ("key", self.key),
                ("description", self.description),
                ("scale", self.scale),
                ("metadata", self.metadata),
            )
            if value is not None
        }


@dataclass
class FeedbackCollection:
    """A persisted feedback collection from the feedback_collections table.

    Attributes:
        name: Human-readable unique name (max 63 chars).
        key: Unique URL-safe slug (max 64 chars).
        scale: Numeric range or enumerated labels.
        api_key: Secret issued at creation (``fx_`` + 64 hex chars).
        id: Store-generated UUID.
        description: Optional admin-facing description (max 255 chars).
        metadata: Optional free-form JSON schema for item metadata.
        created_at: Set by the store on insert.
        updated_at: Set by the store on insert and update.
    """

    name: str
    key: str
    scale: Scale
    api_key: str
    id: uuid.UUID | None = None
    description: str | None = None
    metadata: dict[str, Any] | None = field(default=None)
    created_at: datetime | None = None
    updated_at: datetime | None = None
