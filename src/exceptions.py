"""
Application errors.

Everything the service refuses on purpose is raised as an ``AppException``
subclass. Each class fixes the HTTP status, the machine-readable ``code`` and
a default message; ``src.core.handlers.app_exception_handler`` renders them as

    {"error": {"code", "message", "details"}, "meta": {"request_id"}}

Hierarchy:
    AppException (500 INTERNAL_ERROR)
    ├── AuthenticationError (401)
    │   ├── InvalidCredentialsError
    │   ├── InvalidTokenError
    │   └── TokenExpiredError
    ├── AuthorizationError (403)
    │   ├── InsufficientPermissionsError
    │   ├── ArchivedAccountImmutableError
    │   ├── UserBlockedError
    │   └── ForbiddenError
    ├── BadRequestError (400)
    │   ├── CannotModifyOwnerError
    │   ├── AlreadyMemberError
    │   ├── InvalidCategoryForAccountError
    │   ├── CategoryInUseError
    │   └── CannotDeleteSelfError
    ├── ResourceError
    │   ├── NotFoundError (404)
    │   │   ├── AccessDeniedError
    │   │   └── UserNotFoundError
    │   └── AlreadyExistsError (409)
    └── ValidationError (422)
        └── InvalidInputError
"""

from typing import Any


class AppException(Exception):
    """
    Base class of every handled error.

    Subclasses override the ``status_code``, ``error_code`` and
    ``default_message`` class attributes; the constructor arguments override
    them per instance.

    Attributes:
        message: Human-readable explanation sent to the client
        status_code: HTTP status of the response
        error_code: Stable code clients can branch on
        details: Extra structured context (ids, field names...)
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code}: {self.message!r})"


# ----------------------------------------------------------------------------
# 401
# ----------------------------------------------------------------------------


class AuthenticationError(AppException):
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"
    default_message = "Authentication failed"


class InvalidCredentialsError(AuthenticationError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class InvalidTokenError(AuthenticationError):
    """Bad signature, malformed payload or wrong token type."""

    error_code = "INVALID_TOKEN"
    default_message = "Invalid or malformed token"


class TokenExpiredError(AuthenticationError):
    error_code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


# ----------------------------------------------------------------------------
# 403
# ----------------------------------------------------------------------------


class AuthorizationError(AppException):
    status_code = 403
    error_code = "AUTHORIZATION_FAILED"
    default_message = "Access forbidden"


class InsufficientPermissionsError(AuthorizationError):
    """The caller's role on the account does not grant the operation."""

    error_code = "INSUFFICIENT_PERMISSIONS"
    default_message = "Insufficient permissions to perform this action"


class ArchivedAccountImmutableError(AuthorizationError):
    """
    Edit attempted on an archived account.

    Raised for owners too; only administrators can change an archived account.
    """

    error_code = "ARCHIVED_ACCOUNT_IMMUTABLE"
    default_message = "Archived accounts cannot be modified"


class UserBlockedError(AuthorizationError):
    error_code = "ACCOUNT_BLOCKED"
    default_message = "This user account has been blocked"


class ForbiddenError(AuthorizationError):
    """Platform-level refusal, e.g. a non-admin on an admin route."""

    error_code = "FORBIDDEN"
    default_message = "This action is forbidden"


# ----------------------------------------------------------------------------
# 400
# ----------------------------------------------------------------------------


class BadRequestError(AppException):
    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"


class CannotModifyOwnerError(BadRequestError):
    error_code = "CANNOT_MODIFY_OWNER"
    default_message = "The account owner cannot be modified or removed"


class AlreadyMemberError(BadRequestError):
    error_code = "ALREADY_MEMBER"
    default_message = "User is already a member of this account"


class InvalidCategoryForAccountError(BadRequestError):
    """The category is neither global nor one of the account's own."""

    error_code = "INVALID_CATEGORY_FOR_ACCOUNT"
    default_message = "Category does not belong to this account"


class CategoryInUseError(BadRequestError):
    error_code = "CATEGORY_IN_USE"
    default_message = "Category is used by existing movements and cannot be deleted"


class CannotDeleteSelfError(BadRequestError):
    error_code = "CANNOT_DELETE_SELF"
    default_message = "You cannot delete your own user"


# ----------------------------------------------------------------------------
# 404 / 409
# ----------------------------------------------------------------------------


class ResourceError(AppException):
    """
    Errors about a named resource.

    The first argument is the resource name used to build the message
    (``NotFoundError("Tag")`` -> "Tag not found"); pass ``message`` to replace
    it entirely.
    """

    resource_suffix: str = ""

    def __init__(
        self,
        resource: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None and resource:
            message = f"{resource} {self.resource_suffix}"
        super().__init__(message=message, details=details)


class NotFoundError(ResourceError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"
    resource_suffix = "not found"


class AccessDeniedError(NotFoundError):
    """
    No membership on the requested account.

    Answered as 404 so a missing account and a foreign one look the same.
    """

    error_code = "ACCOUNT_ACCESS_DENIED"
    default_message = "Account not found or access denied"


class UserNotFoundError(NotFoundError):
    error_code = "USER_NOT_FOUND"
    default_message = "User not found"


class AlreadyExistsError(ResourceError):
    status_code = 409
    error_code = "ALREADY_EXISTS"
    default_message = "Resource already exists"
    resource_suffix = "already exists"


# ----------------------------------------------------------------------------
# 422
# ----------------------------------------------------------------------------


class ValidationError(AppException):
    status_code = 422
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class InvalidInputError(ValidationError):
    """Input that passed schema validation but cannot be acted on."""

    error_code = "INVALID_INPUT"
    default_message = "Invalid input"

    def __init__(
        self,
        field: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None and field:
            message = f"Invalid input for field: {field}"
        if field:
            details = {"field": field, **(details or {})}
        super().__init__(message=message, details=details)
