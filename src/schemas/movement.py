"""
Movement Pydantic schemas for API request/response handling.

This module provides:
- Movement creation, update and bulk creation schemas
- Movement list and detail responses
- Movement filtering schema
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.enums import MovementOrigin, MovementState, MovementType
from src.schemas.category import CategoryBrief
from src.schemas.document import DocumentResponse
from src.schemas.tag import TagBrief


def validate_amount(value: Decimal) -> Decimal:
    """
    Validate a monetary amount.

    Must be strictly positive, have at most 2 decimal places and fit in
    NUMERIC(15,2).
    """
    if value <= 0:
        raise ValueError("Amount must be greater than zero")

    if value.as_tuple().exponent < -2:
        raise ValueError("Amount must have at most 2 decimal places")

    if value >= Decimal("10") ** 13:
        raise ValueError("Amount is too large (max 9,999,999,999,999.99)")

    return value


class MovementBase(BaseModel):
    """
    Base movement schema with common fields.

    Attributes:
        type: income or expense
        operation_date: Date the money moved
        amount: Positive amount in the account currency
        category_id: Category (global or of the same account)
        provider: Counterparty (shop, employer, ...)
        description: Short description
        notes: Free-form notes
        origin: manual or scanned
        state: confirmed or pending_review
    """

    type: MovementType = Field(description="income or expense", examples=["expense"])
    operation_date: date = Field(description="Operation date", examples=["2024-03-15"])
    amount: Decimal = Field(
        description="Positive amount in the account currency",
        examples=["42.50"],
    )
    category_id: uuid.UUID = Field(description="Category ID")
    provider: str | None = Field(default=None, max_length=255, examples=["Mercadona"])
    description: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None)
    origin: MovementOrigin = Field(default=MovementOrigin.manual)
    state: MovementState = Field(default=MovementState.confirmed)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal) -> Decimal:
        """Validate amount sign and precision."""
        return validate_amount(value)


class MovementCreate(MovementBase):
    """
    Schema for movement creation.

    Attributes:
        tag_ids: Tags to attach; ids of other accounts' tags are ignored
    """

    tag_ids: list[uuid.UUID] = Field(default_factory=list, description="Tag IDs")


class MovementUpdate(BaseModel):
    """
    Schema for updating a movement.

    All fields are optional. When ``tag_ids`` is given the tag set is
    replaced; when omitted the tags are left alone.
    """

    type: MovementType | None = None
    operation_date: date | None = None
    amount: Decimal | None = None
    category_id: uuid.UUID | None = None
    provider: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    notes: str | None = None
    origin: MovementOrigin | None = None
    state: MovementState | None = None
    tag_ids: list[uuid.UUID] | None = Field(default=None, description="Replacement tag set")

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal | None) -> Decimal | None:
        if value is None:
            return None
        return validate_amount(value)


class MovementBulkCreate(BaseModel):
    """
    Schema for bulk movement creation.

    Movements whose category is not usable in the account are skipped.
    """

    movements: list[MovementBase] = Field(
        min_length=1,
        max_length=500,
        description="Movements to create",
    )


class MovementBulkResult(BaseModel):
    """
    Result of a bulk creation.

    Attributes:
        message: Human-readable result
        count: Number of movements created
        ids: IDs of the created movements
    """

    message: str
    count: int
    ids: list[uuid.UUID]


class MovementResponse(BaseModel):
    """
    Schema for movement response.

    Attributes:
        id: Movement UUID
        account_id: Owning account
        type: income or expense
        operation_date: Operation date
        amount: Amount in the account currency
        category: Category id, name and type
        provider: Counterparty
        description: Short description
        notes: Free-form notes
        origin: manual or scanned
        state: confirmed or pending_review
        tags: Attached tags
        created_by: User who created the movement
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: uuid.UUID
    account_id: uuid.UUID
    type: MovementType
    operation_date: date
    amount: Decimal
    category_id: uuid.UUID
    category: CategoryBrief | None = None
    provider: str | None = None
    description: str | None = None
    notes: str | None = None
    origin: MovementOrigin
    state: MovementState
    tags: list[TagBrief] = Field(default_factory=list)
    created_by: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MovementDetailResponse(MovementResponse):
    """Movement with its attached documents."""

    documents: list[DocumentResponse] = Field(default_factory=list)


class MovementFilterParams(BaseModel):
    """
    Query parameters for the movement list.

    Attributes:
        type: Only income or only expense
        state: Only confirmed or only pending_review
        category_id: Only this category
        date_from: Operation date lower bound (inclusive)
        date_to: Operation date upper bound (inclusive)
        provider: Case-insensitive substring of the provider
        search: Case-insensitive substring of description, provider or notes
    """

    type: MovementType | None = None
    state: MovementState | None = None
    category_id: uuid.UUID | None = None
    date_from: date | None = None
    date_to: date | None = None
    provider: str | None = Field(default=None, max_length=255)
    search: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def validate_date_range(self) -> "MovementFilterParams":
        """Reject ranges whose start is after their end."""
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must be on or before date_to")
        return self
