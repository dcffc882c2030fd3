"""
Models for discovered UI components.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeatureStatus(str, Enum):
    """Whether a discovered component can be mounted by the frontend."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class GeneratedFeature(BaseModel):
    """
    A UI component found in the components directory.

    Derived from the filesystem on every scan; never stored in the database.
    """

    id: str = Field(description="Lower-cased component name")
    name: str = Field(description="Component name (filename without extension)")
    component_path: str = Field(description="Import path used by the frontend")
    description: str = Field(description="First line of the leading block comment")
    status: FeatureStatus = Field(default=FeatureStatus.INACTIVE)
    created_at: datetime = Field(
        description="Generation time from the manifest, else file modification time"
    )
    file_path: str = Field(description="Filename relative to the components directory")
    has_named_export: bool = False
    has_default_export: bool = False

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
