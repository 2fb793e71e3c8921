"""
Metadata API response schemas.

This module provides Pydantic schemas for metadata endpoints that serve
as the authoritative source for enumerated values (account types, account
roles, movement types, category types).
"""

from pydantic import BaseModel, Field


class EnumItem(BaseModel):
    """Single enumerated value with its display label."""

    key: str = Field(description="Value sent to and returned by the API", examples=["personal"])
    label: str = Field(description="Display label", examples=["Personal"])


class AccountTypesResponse(BaseModel):
    """Response schema for GET /api/v1/metadata/account-types"""

    account_types: list[EnumItem] = Field(description="Available account types")


class AccountRolesResponse(BaseModel):
    """Response schema for GET /api/v1/metadata/account-roles"""

    account_roles: list[EnumItem] = Field(description="Roles a member can hold")


class MovementTypesResponse(BaseModel):
    """Response schema for GET /api/v1/metadata/movement-types"""

    movement_types: list[EnumItem] = Field(description="Movement types")


class CategoryTypesResponse(BaseModel):
    """Response schema for GET /api/v1/metadata/category-types"""

    category_types: list[EnumItem] = Field(description="Category types")
