"""
Movement and Tag models.

This module defines:
- Movement: an income or expense entry of an account
- Tag: free-form label scoped to one account
- movement_tags: many-to-many association between movements and tags

Amounts are strictly positive Numeric(15, 2) values expressed in the
account's currency; the movement type carries the sign.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.category import Category
from src.models.enums import MovementOrigin, MovementState, MovementType
from src.models.mixins import CreatedAtMixin, TimestampMixin

movement_tags = Table(
    "movement_tags",
    Base.metadata,
    Column(
        "movement_id",
        UUID(as_uuid=True),
        ForeignKey("movements.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        UUID(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


# =============================================================================
# Tag Model
# =============================================================================


class Tag(Base, CreatedAtMixin):
    """
    Account-scoped label for movements.

    Attributes:
        id: UUID primary key
        account_id: Owning account
        name: Label, unique per account (case-insensitive, enforced in
            TagService)
        color: Hex color, default #3B82F6
    """

    __tablename__ = "tags"

    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default="#3B82F6",
    )

    __table_args__ = (
        UniqueConstraint("account_id", "name", name="uq_tags_account_name"),
    )

    def __repr__(self) -> str:
        return f"Tag(id={self.id}, name={self.name}, account_id={self.account_id})"


# =============================================================================
# Movement Model
# =============================================================================


class Movement(Base, TimestampMixin):
    """
    Income or expense entry of an account.

    Attributes:
        id: UUID primary key
        account_id: Account the movement belongs to
        type: income or expense
        operation_date: Date the operation happened
        amount: Strictly positive amount in the account's currency
        category_id: Global category or a category of the same account
        provider: Counterparty (shop, employer...)
        description / notes: Free text
        origin: manual or scanned
        state: confirmed or pending_review; only confirmed movements count
            toward balances and reports
        created_by: User who recorded the movement

    Relationships:
        category: Category object (eager-loaded)
        tags: Tag objects of the same account (eager-loaded)
    """

    __tablename__ = "movements"

    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[MovementType] = mapped_column(
        nullable=False,
        index=True,
    )

    operation_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )

    # Numeric(15, 2) allows amounts up to 9,999,999,999,999.99
    amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2),
        nullable=False,
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    provider: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    origin: Mapped[MovementOrigin] = mapped_column(
        nullable=False,
        default=MovementOrigin.manual,
    )

    state: Mapped[MovementState] = mapped_column(
        nullable=False,
        default=MovementState.confirmed,
        index=True,
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    category: Mapped[Category] = relationship(
        Category,
        lazy="selectin",
    )

    tags: Mapped[list[Tag]] = relationship(
        Tag,
        secondary=movement_tags,
        lazy="selectin",
        order_by=Tag.name,
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"Movement(id={self.id}, type={self.type.value}, amount={self.amount}, "
            f"date={self.operation_date})"
        )
