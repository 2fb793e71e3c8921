"""
Service layer for business logic.

This package provides service classes that implement business logic,
coordinate between repositories, and handle transaction management.
"""

from src.services.account_service import AccountService
from src.services.auth_service import AuthService
from src.services.calendar_service import CalendarService
from src.services.category_service import CategoryService
from src.services.currency_service import CurrencyService
from src.services.document_service import DocumentService
from src.services.movement_service import MovementService
from src.services.permission_service import PermissionService
from src.services.report_service import ReportService
from src.services.tag_service import TagService
from src.services.task_service import TaskService
from src.services.user_service import UserService

__all__ = [
    "AccountService",
    "AuthService",
    "CalendarService",
    "CategoryService",
    "CurrencyService",
    "DocumentService",
    "MovementService",
    "PermissionService",
    "ReportService",
    "TagService",
    "TaskService",
    "UserService",
]
