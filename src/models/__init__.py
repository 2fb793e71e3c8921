"""
Database models for the Ledgerline Finance API.

This module exports all SQLAlchemy models and the declarative base.
Import models from this module to ensure every table is registered on
``Base.metadata``.
"""

from src.models.account import Account, Membership
from src.models.base import Base
from src.models.calendar import CalendarEvent, Reminder
from src.models.category import Category
from src.models.document import Document
from src.models.enums import (
    AccessType,
    AccountRole,
    AccountState,
    AccountType,
    CategoryType,
    DocumentOrigin,
    DocumentType,
    EventType,
    MovementOrigin,
    MovementState,
    MovementType,
    Recurrence,
    ReminderChannel,
    ReportPeriod,
    TaskPriority,
    TaskState,
    UserRole,
    UserState,
)
from src.models.mixins import AuditFieldsMixin, CreatedAtMixin, TimestampMixin
from src.models.movement import Movement, Tag, movement_tags
from src.models.task import Task, TaskHistory
from src.models.user import User

__all__ = [
    # Base
    "Base",
    # Mixins
    "CreatedAtMixin",
    "TimestampMixin",
    "AuditFieldsMixin",
    # Users
    "User",
    "UserRole",
    "UserState",
    # Accounts
    "Account",
    "Membership",
    "AccountType",
    "AccountState",
    "AccountRole",
    "AccessType",
    # Ledger
    "Category",
    "CategoryType",
    "Movement",
    "MovementType",
    "MovementOrigin",
    "MovementState",
    "Tag",
    "movement_tags",
    "Document",
    "DocumentType",
    "DocumentOrigin",
    # Tasks
    "Task",
    "TaskHistory",
    "TaskState",
    "TaskPriority",
    # Calendar
    "CalendarEvent",
    "Reminder",
    "EventType",
    "Recurrence",
    "ReminderChannel",
    # Reports
    "ReportPeriod",
]
