"""
Task and TaskHistory models.

Tasks are personal to-do items of a user, optionally tied to one of their
accounts. Every state change appends a TaskHistory row; history rows are
never updated.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import TaskPriority, TaskState
from src.models.mixins import CreatedAtMixin, TimestampMixin


class Task(Base, TimestampMixin):
    """
    To-do item owned by a user.

    Attributes:
        id: UUID primary key
        user_id: Owner
        account_id: Optional related account (set NULL if the account goes)
        title / description: Content
        start_at / end_at: Optional schedule; ``end_at`` in the past on an
            open task makes it overdue
        state: pending, in_progress, completed, cancelled
        list_name: Free-form list, default "general"
        priority: low, medium, high (default medium)
        assignee_id: Optional user the task is assigned to
        category_id: Optional category

    Relationships:
        history: TaskHistory rows, oldest first
    """

    __tablename__ = "tasks"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    start_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    end_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    state: Mapped[TaskState] = mapped_column(
        nullable=False,
        default=TaskState.pending,
        index=True,
    )

    list_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="general",
    )

    priority: Mapped[TaskPriority] = mapped_column(
        nullable=False,
        default=TaskPriority.medium,
    )

    assignee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    history: Mapped[list["TaskHistory"]] = relationship(
        "TaskHistory",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskHistory.created_at",
    )

    def __repr__(self) -> str:
        return f"Task(id={self.id}, title={self.title}, state={self.state.value})"


class TaskHistory(Base, CreatedAtMixin):
    """
    Append-only record of a task state change.

    Attributes:
        task_id: Task the entry belongs to
        previous_state: State before the change (NULL for creation)
        new_state: State after the change
        user_id: Who made the change
        comment: Optional note
    """

    __tablename__ = "task_history"

    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    previous_state: Mapped[Optional[TaskState]] = mapped_column(
        nullable=True,
    )

    new_state: Mapped[TaskState] = mapped_column(
        nullable=False,
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    comment: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
