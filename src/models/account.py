"""
Account and Membership models.

This module defines:
- Account: a ledger that movements, categories, tags and events belong to
- Membership: links a user to an account with a role (owner, editor, readonly)

Architecture:
- The creator of an account receives the only ``owner`` membership
- Other users join through invitations (``shared`` access type)
- Each (user, account) pair has at most one membership
- Currency lives on the account; every amount in the account is expressed
  in it, so changing it converts all movement and event amounts
- Archiving sets ``state = archived``; accounts are never deleted through
  the API
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import AccessType, AccountRole, AccountState, AccountType
from src.models.mixins import AuditFieldsMixin, CreatedAtMixin, TimestampMixin
from src.models.user import User


# =============================================================================
# Account Model
# =============================================================================


class Account(Base, TimestampMixin, AuditFieldsMixin):
    """
    Ledger model.

    Attributes:
        id: UUID primary key
        name: User-defined name
        type: Kind of ledger (personal, business, savings, shared)
        currency: ISO 4217 code (3 upper-case letters), default USD
        owner_id: User who created the account
        state: active or archived
        description: Optional free text
        created_at / updated_at: Timestamps
        created_by / updated_by: Audit fields

    Relationships:
        owner: User object who created the account (eager-loaded)
        memberships: Membership rows of the account

    Currency:
        Changing ``currency`` is done by AccountService inside one
        transaction that also converts every movement amount and every
        non-null event amount of the account.
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    type: Mapped[AccountType] = mapped_column(
        nullable=False,
    )

    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        default="USD",
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    state: Mapped[AccountState] = mapped_column(
        nullable=False,
        default=AccountState.active,
        index=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    owner: Mapped[User] = relationship(
        User,
        foreign_keys=[owner_id],
        lazy="selectin",
    )

    memberships: Mapped[list["Membership"]] = relationship(
        "Membership",
        back_populates="account",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_archived(self) -> bool:
        return self.state == AccountState.archived

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id}, name={self.name}, "
            f"currency={self.currency}, state={self.state.value})"
        )


# =============================================================================
# Membership Model
# =============================================================================


class Membership(Base, CreatedAtMixin):
    """
    A user's access to one account.

    Attributes:
        id: UUID primary key
        user_id: Member (foreign key to users)
        account_id: Account (foreign key to accounts)
        role: owner, editor or readonly
        access_type: independent (creator) or shared (invited)
        created_at: When the membership was created

    Invariants:
        - Unique on (user_id, account_id)
        - Exactly one owner membership per account, created together with
          the account and never changed or removed afterwards
        - Invitations can only grant editor or readonly

    Example:
        owner_membership = Membership(
            user_id=user.id,
            account_id=account.id,
            role=AccountRole.owner,
            access_type=AccessType.independent,
        )
    """

    __tablename__ = "memberships"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[AccountRole] = mapped_column(
        nullable=False,
    )

    access_type: Mapped[AccessType] = mapped_column(
        nullable=False,
        default=AccessType.independent,
    )

    account: Mapped[Account] = relationship(
        Account,
        back_populates="memberships",
        lazy="selectin",
    )

    user: Mapped[User] = relationship(
        User,
        foreign_keys=[user_id],
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "account_id", name="uq_memberships_user_account"),
    )

    def __repr__(self) -> str:
        return (
            f"Membership(id={self.id}, account_id={self.account_id}, "
            f"user_id={self.user_id}, role={self.role.value})"
        )
