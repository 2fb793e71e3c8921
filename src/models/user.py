"""
User model.

A user logs in with email and password, has one global role (ordinary or
admin) and a login state (active or blocked). Users reach accounts only
through memberships; admins bypass memberships entirely.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.enums import UserRole, UserState
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """
    User model for authentication and profile management.

    Attributes:
        id: UUID primary key
        name: Display name
        email: Unique email address, stored lower-case
        password_hash: Argon2id hashed password
        role: Global role (ordinary, admin)
        state: Login state (active, blocked)
        last_login_at: Timestamp of last successful login
        created_at: When the user was created
        updated_at: When the user was last updated

    Deletion:
        Users are hard-deleted by an administrator. Memberships, tasks,
        events and documents of the user cascade at the database level.

    Security:
        - password_hash stores Argon2id hash (never store plain passwords)
        - blocked users cannot log in and their tokens are refused
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[UserRole] = mapped_column(
        nullable=False,
        default=UserRole.ordinary,
        index=True,
    )

    state: Mapped[UserState] = mapped_column(
        nullable=False,
        default=UserState.active,
        index=True,
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_blocked(self) -> bool:
        return self.state == UserState.blocked

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role.value})"
