"""
Category Pydantic schemas for API request/response handling.

This module provides:
- Category creation and update schemas (account-scoped and global)
- Category response schema
"""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.models.enums import CategoryType

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _validate_color(value: str | None) -> str | None:
    if value is None:
        return None
    if not _HEX_COLOR.match(value):
        raise ValueError("Color must be a valid hex code (e.g., #FF5733, #3498DB)")
    return value.upper()


class CategoryCreate(BaseModel):
    """
    Schema for category creation.

    Used both for account categories and, by administrators, for global
    categories.

    Attributes:
        name: Category name (unique per account, case-insensitive)
        type: Movement types the category applies to
        display_order: Position in pickers (lower first)
        icon: Optional icon identifier
        color: Optional hex color (#RRGGBB)
    """

    name: str = Field(
        min_length=1,
        max_length=100,
        description="Category name",
        examples=["Groceries", "Salary", "Rent"],
    )
    type: CategoryType = Field(
        default=CategoryType.expense,
        description="income, expense or both",
    )
    display_order: int = Field(default=0, ge=0, description="Position in pickers")
    icon: str | None = Field(default=None, max_length=50, examples=["cart"])
    color: str | None = Field(default=None, examples=["#22C55E"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Trim whitespace and reject empty names."""
        value = value.strip()
        if not value:
            raise ValueError("Category name cannot be empty or only whitespace")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        """Validate hex color format if provided."""
        return _validate_color(value)


class CategoryUpdate(BaseModel):
    """
    Schema for updating a category.

    All fields are optional to support partial updates.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: CategoryType | None = None
    display_order: int | None = Field(default=None, ge=0)
    icon: str | None = Field(default=None, max_length=50)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Category name cannot be empty or only whitespace")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        return _validate_color(value)


class CategoryResponse(BaseModel):
    """
    Schema for category response.

    Attributes:
        id: Category UUID
        account_id: Owning account (None for global categories)
        name: Category name
        type: income, expense or both
        display_order: Position in pickers
        icon: Icon identifier
        color: Hex color
        is_global: Whether this is a global template category
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: uuid.UUID = Field(description="Category unique identifier")
    account_id: uuid.UUID | None = Field(description="Owning account (None if global)")
    name: str = Field(description="Category name")
    type: CategoryType = Field(description="Movement types it applies to")
    display_order: int = Field(description="Position in pickers")
    icon: str | None = Field(default=None, description="Icon identifier")
    color: str | None = Field(default=None, description="Hex color")
    is_global: bool = Field(description="Global template category")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryBrief(BaseModel):
    """Category id and name embedded in movement and event responses."""

    id: uuid.UUID
    name: str
    type: CategoryType

    model_config = {"from_attributes": True}
