"""
Account Pydantic schemas for API request/response handling.

This module provides:
- Account creation and update schemas
- Account projections for list and detail endpoints
- The update result returned after a possible currency conversion
- Account filtering schema
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.models.enums import AccessType, AccountRole, AccountState, AccountType
from src.schemas.currency import validate_currency_code
from src.schemas.user import UserSummary


class AccountBase(BaseModel):
    """
    Base account schema with common fields.

    Attributes:
        name: Descriptive name for the account
        type: Kind of ledger
        description: Free-form notes about the account (optional)
    """

    name: str = Field(
        min_length=1,
        max_length=255,
        description="Account name (1-255 characters)",
        examples=["Household", "Freelance income", "Trip to Lisbon"],
    )

    type: AccountType = Field(
        default=AccountType.personal,
        description="Kind of ledger (informational)",
        examples=["personal", "shared"],
    )

    description: str | None = Field(
        default=None,
        max_length=500,
        description="Notes about the account",
    )

    @field_validator("name")
    @classmethod
    def validate_account_name(cls, value: str) -> str:
        """
        Validate account name.

        Trims whitespace and ensures it's not empty after trimming.
        """
        value = value.strip()
        if not value:
            raise ValueError("Account name cannot be empty or only whitespace")
        return value


class AccountCreate(AccountBase):
    """
    Schema for account creation.

    The creator becomes the owner and the account receives a private copy
    of every global category.

    Attributes:
        currency: Supported currency code (defaults to the platform currency)
    """

    currency: str | None = Field(
        default=None,
        description="Currency code (USD, EUR, GBP, MXN, ARS, BRL, COP)",
        examples=["USD", "EUR"],
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str | None) -> str | None:
        """Normalize to upper-case and reject unsupported codes."""
        if value is None:
            return None
        return validate_currency_code(value)


class AccountUpdate(BaseModel):
    """
    Schema for updating an account.

    All fields are optional to support partial updates. Changing the
    currency converts every amount stored under the account.

    Attributes:
        name: New account name
        type: New account type
        currency: New currency code (triggers conversion when it differs)
        state: New lifecycle state (admins use this to restore archived accounts)
        description: New description
    """

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="New account name",
    )
    type: AccountType | None = Field(default=None, description="New account type")
    currency: str | None = Field(
        default=None,
        description="New currency code; all amounts are converted when it changes",
        examples=["EUR"],
    )
    state: AccountState | None = Field(default=None, description="New lifecycle state")
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_account_name(cls, value: str | None) -> str | None:
        """Validate account name if provided."""
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Account name cannot be empty or only whitespace")
        return value

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str | None) -> str | None:
        """Normalize to upper-case and reject unsupported codes."""
        if value is None:
            return None
        return validate_currency_code(value)


class AccountBalance(BaseModel):
    """Confirmed balance shown in account lists."""

    total: Decimal = Field(description="Confirmed income minus confirmed expenses")


class AccountBalanceBreakdown(BaseModel):
    """
    Confirmed totals shown on the account detail.

    Attributes:
        total_income: Sum of confirmed income movements
        total_expenses: Sum of confirmed expense movements
        balance: total_income - total_expenses
    """

    total_income: Decimal = Field(description="Sum of confirmed income")
    total_expenses: Decimal = Field(description="Sum of confirmed expenses")
    balance: Decimal = Field(description="Income minus expenses")


class AccountResponse(BaseModel):
    """
    Account projection used by list and create endpoints.

    Attributes:
        id: Account UUID
        name: Account name
        type: Kind of ledger
        currency: Currency of every amount in the account
        state: Lifecycle state
        description: Notes about the account
        role: Caller's role on the account
        access_type: How the caller reached the account
        owner: Name and email of the creating user
        balance: Confirmed balance
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: uuid.UUID = Field(description="Account unique identifier")
    name: str = Field(description="Account name")
    type: AccountType = Field(description="Kind of ledger")
    currency: str = Field(description="Currency code")
    state: AccountState = Field(description="Lifecycle state")
    description: str | None = Field(default=None, description="Notes")
    role: AccountRole = Field(description="Caller's role on the account")
    access_type: AccessType = Field(description="How the caller reached the account")
    owner: UserSummary = Field(description="Account owner")
    balance: AccountBalance = Field(description="Confirmed balance")
    created_at: datetime = Field(description="When account was created")
    updated_at: datetime = Field(description="When account was last updated")


class MemberResponse(BaseModel):
    """
    One membership of an account.

    Attributes:
        user_id: Member's user ID
        name: Member's display name
        email: Member's email
        role: Role on the account
        access_type: independent for the owner, shared for invited members
        joined_at: When the membership was created
    """

    user_id: uuid.UUID = Field(description="Member's user ID")
    name: str = Field(description="Member's display name")
    email: str = Field(description="Member's email address")
    role: AccountRole = Field(description="Role on the account")
    access_type: AccessType = Field(description="How the member reached the account")
    joined_at: datetime = Field(description="Membership creation timestamp")


class AccountDetailResponse(AccountResponse):
    """
    Account detail with members and a balance breakdown.

    Attributes:
        members: Every membership, owner first
        totals: Confirmed income, expenses and balance
    """

    members: list[MemberResponse] = Field(description="Account members")
    totals: AccountBalanceBreakdown = Field(description="Confirmed totals")


class AccountSummary(BaseModel):
    """Account fields returned after an update, without caller-specific data."""

    id: uuid.UUID
    name: str
    type: AccountType
    currency: str
    state: AccountState
    description: str | None = None
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountUpdateResponse(BaseModel):
    """
    Result of an account update.

    Attributes:
        message: Human-readable result (mentions the conversion when one ran)
        account: Updated account fields
        currency_converted: Whether stored amounts were converted
    """

    message: str = Field(description="Result message")
    account: AccountSummary = Field(description="Updated account")
    currency_converted: bool = Field(description="Whether amounts were converted")


class AccountFilterParams(BaseModel):
    """
    Query parameters for the account list.

    Attributes:
        state: Only accounts in this state
        type: Only accounts of this type
        all: Admins only; list every account instead of their memberships
    """

    state: AccountState | None = Field(default=None, description="Filter by state")
    type: AccountType | None = Field(default=None, description="Filter by type")
    all: bool = Field(default=False, description="List every account (admins only)")


class MemberInvite(BaseModel):
    """
    Schema for inviting a user to an account.

    Attributes:
        email: Email of an existing user (case-insensitive)
        role: Role to grant; ``owner`` can never be granted
    """

    email: str = Field(min_length=3, max_length=255, description="Invitee's email")
    role: AccountRole = Field(default=AccountRole.editor, description="Role to grant")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: AccountRole) -> AccountRole:
        """Invited members are editors or readonly."""
        if value == AccountRole.owner:
            raise ValueError("The owner role cannot be granted")
        return value


class MemberRoleUpdate(BaseModel):
    """
    Schema for changing a member's role.

    Attributes:
        role: New role (editor or readonly)
    """

    role: AccountRole = Field(description="New role")

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: AccountRole) -> AccountRole:
        if value == AccountRole.owner:
            raise ValueError("The owner role cannot be granted")
        return value
