"""
FastAPI dependencies for authentication and authorization.

This module provides:
- Current user extraction from JWT
- Blocked user rejection
- Admin role checking
- Account permission checks for account-scoped routes
- Service factories
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.security import TOKEN_TYPE_ACCESS, decode_token, verify_token_type
from src.exceptions import (
    AuthenticationError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
    UserBlockedError,
)
from src.models.user import User
from src.repositories.account_repository import AccountRepository
from src.repositories.user_repository import UserRepository
from src.services import (
    AccountService,
    AuthService,
    CalendarService,
    CategoryService,
    CurrencyService,
    DocumentService,
    MovementService,
    PermissionService,
    ReportService,
    TagService,
    TaskService,
    UserService,
)
from src.services.permission_service import Granted, Permission

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI - this adds the padlock icon
security = HTTPBearer(
    scheme_name="Bearer",
    description="Enter your JWT access token",
    auto_error=False,
)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    Dependency to extract and validate current user from JWT access token.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Decodes and validates JWT
    3. Verifies token is an access token (not refresh token)
    4. Retrieves user from database
    5. Refuses blocked users

    Args:
        db: Database session
        credentials: HTTP Bearer credentials from security scheme

    Returns:
        User instance of authenticated user

    Raises:
        AuthenticationError (401): Token missing, invalid, expired, or user gone
        UserBlockedError (403): The user has been blocked

    Usage:
        @router.get("/api/auth/profile")
        async def get_profile(current_user: CurrentUser):
            return {"email": current_user.email}
    """
    if not credentials:
        logger.warning("Authentication failed: missing Bearer token")
        raise AuthenticationError("Missing authentication credentials")

    # Decode and validate token
    try:
        token_data = decode_token(credentials.credentials)
    except ExpiredSignatureError:
        logger.warning("Authentication failed: expired access token")
        raise TokenExpiredError()
    except JWTError as e:
        logger.warning(f"Authentication failed: invalid JWT - {e}")
        raise InvalidTokenError()

    # Refresh tokens cannot be used as bearer tokens
    if not verify_token_type(token_data, TOKEN_TYPE_ACCESS):
        logger.warning("Authentication failed: wrong token type")
        raise InvalidTokenError("Invalid token type")

    try:
        user_id = uuid.UUID(str(token_data.get("sub")))
    except ValueError:
        logger.warning(f"Authentication failed: invalid user ID in token - {token_data.get('sub')}")
        raise InvalidTokenError("Invalid token payload")

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        logger.warning(f"Authentication failed: user not found - {user_id}")
        raise AuthenticationError("User not found")

    if user.is_blocked:
        logger.warning(f"Access denied: blocked user {user.id}")
        raise UserBlockedError()

    return user


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency to ensure user has admin privileges.

    Raises:
        ForbiddenError (403): If user is not an admin

    Usage:
        @router.get("/api/v1/users")
        async def list_users(current_user: AdminUser):
            ...
    """
    if not current_user.is_admin:
        logger.warning(f"Access denied: user {current_user.id} attempted admin-only action")
        raise ForbiddenError("Administrator privileges required")

    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]


# ============================================================================
# Account Permission Dependencies
# ============================================================================


def require_account_permission(
    *permissions: Permission,
) -> Callable[..., Awaitable[Granted]]:
    """
    Build a dependency checking permissions on the ``account_id`` path parameter.

    The granted role and permission set are also stored on ``request.state``
    (``account_role`` / ``account_permissions``) for handlers that want them.

    Args:
        *permissions: Permissions the route needs

    Returns:
        Dependency resolving to the caller's Granted access

    Raises:
        AccessDeniedError (404): Caller is not a member (or no such account)
        NotFoundError (404): Admin targeting an account that does not exist
        ArchivedAccountImmutableError (403): Edit attempted on an archived account
        InsufficientPermissionsError (403): Role lacks a required permission

    Usage:
        @router.delete("/{account_id}/movements/{movement_id}")
        async def delete_movement(account_id: uuid.UUID, access: DeleteAccess):
            ...
    """
    required = frozenset(permissions)

    async def dependency(
        account_id: uuid.UUID,
        request: Request,
        db: DbSession,
        current_user: User = Depends(get_current_user),
    ) -> Granted:
        # Admins skip the membership lookup, so existence is checked here
        if current_user.is_admin and not await AccountRepository(db).exists(account_id):
            raise NotFoundError("Account")

        granted = await PermissionService(db).require(current_user, account_id, required)

        request.state.account_role = granted.role
        request.state.account_permissions = granted.permissions
        return granted

    return dependency


ViewAccess = Annotated[Granted, Depends(require_account_permission(Permission.view))]
CreateAccess = Annotated[
    Granted, Depends(require_account_permission(Permission.create, Permission.edit))
]
EditAccess = Annotated[Granted, Depends(require_account_permission(Permission.edit))]
DeleteAccess = Annotated[
    Granted, Depends(require_account_permission(Permission.delete, Permission.edit))
]
ManageCategoriesAccess = Annotated[
    Granted,
    Depends(require_account_permission(Permission.manage_categories, Permission.edit)),
]
InviteAccess = Annotated[
    Granted, Depends(require_account_permission(Permission.invite_users, Permission.edit))
]
ReportsAccess = Annotated[Granted, Depends(require_account_permission(Permission.view_reports))]


# ============================================================================
# Service Dependencies
# ============================================================================


def get_auth_service(db: DbSession) -> AuthService:
    """
    Dependency to get AuthService instance.

    Usage:
        @router.post("/api/auth/login")
        async def login(auth_service: AuthServiceDep):
            user, tokens = await auth_service.login(...)
    """
    return AuthService(db)


def get_user_service(db: DbSession) -> UserService:
    """Dependency to get UserService instance."""
    return UserService(db)


def get_currency_service() -> CurrencyService:
    """Dependency to get CurrencyService instance (no database access)."""
    return CurrencyService()


def get_account_service(
    db: DbSession,
    currency_service: CurrencyService = Depends(get_currency_service),
) -> AccountService:
    """
    Dependency to get AccountService instance.

    The currency service is injected so currency changes can convert stored
    amounts.
    """
    return AccountService(db, currency_service=currency_service)


def get_category_service(db: DbSession) -> CategoryService:
    return CategoryService(db)


def get_movement_service(db: DbSession) -> MovementService:
    return MovementService(db)


def get_tag_service(db: DbSession) -> TagService:
    return TagService(db)


def get_document_service(db: DbSession) -> DocumentService:
    return DocumentService(db)


def get_task_service(db: DbSession) -> TaskService:
    return TaskService(db)


def get_calendar_service(db: DbSession) -> CalendarService:
    return CalendarService(db)


def get_report_service(db: DbSession) -> ReportService:
    return ReportService(db)


# Convenience type aliases for service dependencies
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CurrencyServiceDep = Annotated[CurrencyService, Depends(get_currency_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
MovementServiceDep = Annotated[MovementService, Depends(get_movement_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
CalendarServiceDep = Annotated[CalendarService, Depends(get_calendar_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
