"""
Column mixins shared by the models.

- CreatedAtMixin: ``created_at`` for append-only rows (documents, task history)
- TimestampMixin: ``created_at`` + ``updated_at`` for mutable rows
- AuditFieldsMixin: ``created_by`` / ``updated_by`` user ids on accounts
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(UTC)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )


class TimestampMixin(CreatedAtMixin):
    """
    Creation and last-modification times (UTC).

    ``updated_at`` is set by the ORM on every flushed UPDATE, so rewriting
    amounts during a currency conversion refreshes it for each converted row.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class AuditFieldsMixin:
    """
    Ids of the users who created and last changed the row.

    Plain columns without foreign keys so that deleting a user leaves the
    history intact; nullable for rows written by the system.
    """

    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True)
