"""
User schemas.

Self-service bodies (register, profile, change password) and admin bodies
(create, update, reset password) share the field types below, so the same
name, email and password rules apply on every route.
"""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)

from src.core.security import validate_password_strength
from src.models.enums import UserRole, UserState


def _strong_password(value: str) -> str:
    is_valid, error_message = validate_password_strength(value)
    if not is_valid:
        raise ValueError(error_message)
    return value


DisplayName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
    Field(examples=["Ana García"]),
]
# Stored lower-case; lookups are case-insensitive as well
Email = Annotated[EmailStr, AfterValidator(str.lower)]
NewPassword = Annotated[
    str,
    Field(min_length=8, max_length=128),
    AfterValidator(_strong_password),
]


# ----------------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------------


class UserRegister(BaseModel):
    name: DisplayName
    email: Email
    password: NewPassword


class UserCreate(UserRegister):
    """Admin creation: registration fields plus global role and state."""

    role: UserRole = UserRole.ordinary
    state: UserState = UserState.active


class ProfileUpdate(BaseModel):
    """Partial update of the caller's own name and email."""

    name: DisplayName | None = None
    email: Email | None = None


class UserUpdate(ProfileUpdate):
    """
    Admin update of any user.

    Setting ``state`` to ``blocked`` refuses new logins and every token the
    user still holds.
    """

    role: UserRole | None = None
    state: UserState | None = None


class UserPasswordChange(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: NewPassword


class UserPasswordReset(BaseModel):
    new_password: NewPassword


class UserFilterParams(BaseModel):
    """
    Admin user list filters.

    Attributes:
        search: Case-insensitive substring of the name or the email
        state: Only users in this state
        role: Only users with this role
    """

    search: str | None = Field(default=None, max_length=100)
    state: UserState | None = None
    role: UserRole | None = None


# ----------------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------------


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    state: UserState
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None


class UserSummary(BaseModel):
    """Owner or member identity embedded in account responses."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
