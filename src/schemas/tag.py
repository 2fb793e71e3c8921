"""
Tag Pydantic schemas for API request/response handling.

This module provides:
- Tag creation and update schemas
- Tag responses, with and without usage counts
"""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class TagCreate(BaseModel):
    """
    Schema for tag creation.

    Attributes:
        name: Tag name (unique per account, case-insensitive)
        color: Hex color (#RRGGBB)
    """

    name: str = Field(
        min_length=1,
        max_length=100,
        description="Tag name",
        examples=["vacation", "deductible"],
    )
    color: str = Field(default="#3B82F6", description="Hex color code")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Trim whitespace and reject empty names."""
        value = value.strip()
        if not value:
            raise ValueError("Tag name cannot be empty or only whitespace")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        """Validate hex color format."""
        if not _HEX_COLOR.match(value):
            raise ValueError("Color must be a valid hex code (e.g., #FF5733, #3498DB)")
        return value.upper()


class TagUpdate(BaseModel):
    """Schema for updating a tag; all fields optional."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Tag name cannot be empty or only whitespace")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        if value is not None:
            if not _HEX_COLOR.match(value):
                raise ValueError("Color must be a valid hex code (e.g., #FF5733, #3498DB)")
            return value.upper()
        return value


class TagResponse(BaseModel):
    """
    Schema for tag response.

    Attributes:
        id: Tag UUID
        account_id: Owning account
        name: Tag name
        color: Hex color
        created_at: Creation timestamp
    """

    id: uuid.UUID
    account_id: uuid.UUID
    name: str
    color: str
    created_at: datetime

    model_config = {"from_attributes": True}


class TagWithUsage(TagResponse):
    """Tag plus the number of movements carrying it."""

    movement_count: int = Field(description="Movements carrying this tag")


class TagBrief(BaseModel):
    """Tag fields embedded in movement responses."""

    id: uuid.UUID
    name: str
    color: str

    model_config = {"from_attributes": True}
