"""
Feature request models.

FeatureRequest mirrors one row of the feature_requests table. API payloads
use camelCase field names; Python code uses the snake_case attributes.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeatureRequestStatus(str, Enum):
    """Lifecycle states of a feature request.

    Requests start PENDING and are moved exactly once, to COMPLETED or
    FAILED, after the generator returns. PROCESSING is accepted for storage
    and filtering.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transitions are expected."""
        return self in (FeatureRequestStatus.COMPLETED, FeatureRequestStatus.FAILED)


class FeatureRequest(BaseModel):
    """A natural-language request for a new dashboard capability."""

    id: str = Field(description="Unique identifier (uuid4)")
    description: str = Field(description="Request text as submitted (trimmed)")
    status: FeatureRequestStatus = Field(default=FeatureRequestStatus.PENDING)
    timestamp: datetime = Field(description="When the request was recorded (UTC)")
    generated_components: list[str] = Field(
        default_factory=list,
        description="Paths of files the generator produced, in generator order",
    )
    completed_at: datetime | None = Field(
        default=None, description="When the request reached a terminal status"
    )
    error: str | None = Field(default=None, description="Failure reason for failed requests")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FeatureRequestStats(BaseModel):
    """Request counts by status."""

    total: int = 0
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
