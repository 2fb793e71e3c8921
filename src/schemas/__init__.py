"""
Pydantic schemas for API request/response validation.

This package provides all Pydantic models used for:
- Request validation
- Response serialization
- API documentation
"""

from src.schemas.account import (
    AccountCreate,
    AccountDetailResponse,
    AccountFilterParams,
    AccountResponse,
    AccountUpdate,
    AccountUpdateResponse,
    MemberInvite,
    MemberResponse,
    MemberRoleUpdate,
)
from src.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
)
from src.schemas.calendar import (
    EventCreate,
    EventFilterParams,
    EventResponse,
    EventUpdate,
    PaymentEventCreate,
    ReminderCreate,
    ReminderResponse,
)
from src.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from src.schemas.common import (
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)
from src.schemas.currency import CurrenciesResponse, Currency
from src.schemas.document import DocumentCreate, DocumentResponse
from src.schemas.metadata import (
    AccountRolesResponse,
    AccountTypesResponse,
    CategoryTypesResponse,
    EnumItem,
    MovementTypesResponse,
)
from src.schemas.movement import (
    MovementBulkCreate,
    MovementBulkResult,
    MovementCreate,
    MovementDetailResponse,
    MovementFilterParams,
    MovementResponse,
    MovementUpdate,
)
from src.schemas.report import (
    CategoryBreakdownResponse,
    MonthlyTrendsResponse,
    PeriodComparisonParams,
    PeriodComparisonResponse,
    ReportDateRange,
    TopCategoriesResponse,
    TotalsByPeriodResponse,
)
from src.schemas.tag import TagCreate, TagResponse, TagUpdate, TagWithUsage
from src.schemas.task import (
    TaskCreate,
    TaskDetailResponse,
    TaskFilterParams,
    TaskResponse,
    TaskStatusChange,
    TaskStatusResponse,
    TaskSummary,
    TaskUpdate,
)
from src.schemas.user import (
    ProfileUpdate,
    UserCreate,
    UserFilterParams,
    UserPasswordChange,
    UserPasswordReset,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Account
    "AccountCreate",
    "AccountDetailResponse",
    "AccountFilterParams",
    "AccountResponse",
    "AccountUpdate",
    "AccountUpdateResponse",
    "MemberInvite",
    "MemberResponse",
    "MemberRoleUpdate",
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RefreshTokenRequest",
    "TokenResponse",
    # Calendar
    "EventCreate",
    "EventFilterParams",
    "EventResponse",
    "EventUpdate",
    "PaymentEventCreate",
    "ReminderCreate",
    "ReminderResponse",
    # Category
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    # Common
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    # Currency
    "CurrenciesResponse",
    "Currency",
    # Document
    "DocumentCreate",
    "DocumentResponse",
    # Metadata
    "AccountRolesResponse",
    "AccountTypesResponse",
    "CategoryTypesResponse",
    "EnumItem",
    "MovementTypesResponse",
    # Movement
    "MovementBulkCreate",
    "MovementBulkResult",
    "MovementCreate",
    "MovementDetailResponse",
    "MovementFilterParams",
    "MovementResponse",
    "MovementUpdate",
    # Report
    "CategoryBreakdownResponse",
    "MonthlyTrendsResponse",
    "PeriodComparisonParams",
    "PeriodComparisonResponse",
    "ReportDateRange",
    "TopCategoriesResponse",
    "TotalsByPeriodResponse",
    # Tag
    "TagCreate",
    "TagResponse",
    "TagUpdate",
    "TagWithUsage",
    # Task
    "TaskCreate",
    "TaskDetailResponse",
    "TaskFilterParams",
    "TaskResponse",
    "TaskStatusChange",
    "TaskStatusResponse",
    "TaskSummary",
    "TaskUpdate",
    # User
    "ProfileUpdate",
    "UserCreate",
    "UserFilterParams",
    "UserPasswordChange",
    "UserPasswordReset",
    "UserRegister",
    "UserResponse",
    "UserUpdate",
]
