"""
Category model.

Categories classify movements. A category is either global (shared template
managed by admins, ``account_id`` NULL, ``is_global`` TRUE) or private to one
account. Every new account receives private copies of all global categories,
so later edits to a global never change existing accounts.
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.enums import CategoryType
from src.models.mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """
    Movement category.

    Attributes:
        id: UUID primary key
        account_id: Owning account (NULL for global categories)
        name: Display name, unique per account (case-insensitive, enforced
            in CategoryService)
        type: income, expense or both
        display_order: Sort position inside its type
        icon: Optional icon identifier
        color: Optional hex color
        is_global: True for admin-managed templates

    Deletion:
        Refused while any movement references the category
        (``ondelete="RESTRICT"`` on movements.category_id).
    """

    __tablename__ = "categories"

    account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    type: Mapped[CategoryType] = mapped_column(
        nullable=False,
    )

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    icon: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    color: Mapped[Optional[str]] = mapped_column(
        String(7),
        nullable=True,
    )

    is_global: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"Category(id={self.id}, name={self.name}, type={self.type.value}, "
            f"global={self.is_global})"
        )
