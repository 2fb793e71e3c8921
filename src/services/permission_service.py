"""
Permission service for account access control.

Every account-scoped operation is authorized here. A check combines three
inputs: the caller's global role, their membership role on the account, and
the account's lifecycle state.

Evaluation order:
    1. Global admins are granted the full owner permission set without a
       membership row (this also lets them edit archived accounts, e.g. to
       restore them).
    2. Otherwise the membership is looked up together with the account
       state. No row means access denied; a missing account and a missing
       membership are indistinguishable.
    3. An archived account refuses anything that needs ``edit``, whatever
       the member's role.
    4. The required permissions must be a subset of the role's set.

``authorize`` returns a ``Granted`` or ``Denied`` value; ``require`` raises
the matching AppException instead.

Usage:
    permission_service = PermissionService(session)
    grant = await permission_service.require(
        user, account_id, {Permission.view}
    )
    grant.role  # AccountRole of the caller
"""

import enum
import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import (
    AccessDeniedError,
    ArchivedAccountImmutableError,
    InsufficientPermissionsError,
)
from src.models.enums import AccountRole, AccountState
from src.models.user import User
from src.repositories.membership_repository import MembershipRepository

logger = logging.getLogger(__name__)


class Permission(str, enum.Enum):
    """Actions a member may perform on an account."""

    view = "view"
    create = "create"
    edit = "edit"
    delete = "delete"
    manage_categories = "manage_categories"
    invite_users = "invite_users"
    view_reports = "view_reports"


# Static role -> permission table. Read-only at runtime.
ROLE_PERMISSIONS: MappingProxyType[AccountRole, frozenset[Permission]] = MappingProxyType(
    {
        AccountRole.owner: frozenset(Permission),
        AccountRole.editor: frozenset(
            {
                Permission.view,
                Permission.create,
                Permission.edit,
                Permission.view_reports,
            }
        ),
        AccountRole.readonly: frozenset({Permission.view, Permission.view_reports}),
    }
)


class DenialKind(str, enum.Enum):
    """Why an authorization check failed."""

    access_denied = "access_denied"
    insufficient_permission = "insufficient_permission"
    archived_account_immutable = "archived_account_immutable"


@dataclass(frozen=True)
class Granted:
    """Successful check: the caller's role and its full permission set."""

    role: AccountRole
    permissions: frozenset[Permission]


@dataclass(frozen=True)
class Denied:
    """Failed check."""

    kind: DenialKind


AuthorizationResult = Granted | Denied


class PermissionService:
    """
    Service for checking account access permissions.

    The service never writes; it reads one membership row per check.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize permission service.

        Args:
            session: Async database session
        """
        self.session = session
        self.membership_repo = MembershipRepository(session)

    async def authorize(
        self,
        principal: User,
        account_id: uuid.UUID,
        required: Iterable[Permission],
    ) -> AuthorizationResult:
        """
        Decide whether ``principal`` may perform ``required`` on an account.

        Args:
            principal: Authenticated user
            account_id: Target account
            required: Permissions the operation needs

        Returns:
            Granted(role, permissions) or Denied(kind)

        Example:
            result = await permission_service.authorize(
                user, account_id, {Permission.edit}
            )
            if isinstance(result, Denied):
                ...
        """
        required_set = frozenset(required)

        if principal.is_admin:
            return Granted(
                role=AccountRole.owner,
                permissions=ROLE_PERMISSIONS[AccountRole.owner],
            )

        access = await self.membership_repo.get_access(principal.id, account_id)
        if access is None:
            return Denied(DenialKind.access_denied)

        role, account_state = access

        if account_state == AccountState.archived and Permission.edit in required_set:
            return Denied(DenialKind.archived_account_immutable)

        granted = ROLE_PERMISSIONS[role]
        if not required_set <= granted:
            return Denied(DenialKind.insufficient_permission)

        return Granted(role=role, permissions=granted)

    async def require(
        self,
        principal: User,
        account_id: uuid.UUID,
        required: Iterable[Permission],
    ) -> Granted:
        """
        Like ``authorize`` but raises on denial.

        Raises:
            AccessDeniedError: No membership (or no such account)
            ArchivedAccountImmutableError: Edit attempted on an archived account
            InsufficientPermissionsError: Role lacks a required permission
        """
        required_set = frozenset(required)
        result = await self.authorize(principal, account_id, required_set)

        if isinstance(result, Granted):
            return result

        logger.warning(
            f"Account access refused: user={principal.id} account={account_id} "
            f"required={sorted(p.value for p in required_set)} reason={result.kind.value}"
        )

        if result.kind == DenialKind.access_denied:
            raise AccessDeniedError()
        if result.kind == DenialKind.archived_account_immutable:
            raise ArchivedAccountImmutableError()
        raise InsufficientPermissionsError(
            details={"required": sorted(p.value for p in required_set)}
        )
