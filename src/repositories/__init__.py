"""
Repository layer for database operations.

Each repository wraps one model (or a closely related pair) and exposes the
queries the services need. Repositories flush but never commit.
"""

from src.repositories.account_repository import AccountRepository
from src.repositories.base import BaseRepository
from src.repositories.calendar_repository import (
    CalendarEventRepository,
    ReminderRepository,
)
from src.repositories.category_repository import CategoryRepository
from src.repositories.document_repository import DocumentRepository
from src.repositories.membership_repository import MembershipRepository
from src.repositories.movement_repository import MovementRepository
from src.repositories.tag_repository import TagRepository
from src.repositories.task_repository import TaskRepository
from src.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "AccountRepository",
    "MembershipRepository",
    "CategoryRepository",
    "MovementRepository",
    "TagRepository",
    "DocumentRepository",
    "TaskRepository",
    "CalendarEventRepository",
    "ReminderRepository",
]
