"""
Account management API routes.

This module provides:
- POST /api/v1/accounts - Create new account
- GET /api/v1/accounts - List the caller's accounts
- GET /api/v1/accounts/{account_id} - Get account with members and totals
- PUT /api/v1/accounts/{account_id} - Update account (converts amounts on currency change)
- DELETE /api/v1/accounts/{account_id} - Archive account (soft delete)
- GET/POST /api/v1/accounts/{account_id}/members - List / invite members
- PUT/DELETE /api/v1/accounts/{account_id}/members/{user_id} - Change role / remove member
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    AccountServiceDep,
    CurrentUser,
    DeleteAccess,
    EditAccess,
    InviteAccess,
    ViewAccess,
)
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
from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["Accounts"])

ACCESS_RESPONSES = {
    401: {"description": "Not authenticated", "model": ErrorResponse},
    403: {"description": "Insufficient permissions or archived account", "model": ErrorResponse},
    404: {"description": "Account not found or no access", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new account",
    description="""
    Create a new account owned by the authenticated user.

    The creator becomes the `owner` member (access type `independent`) and
    every global category is copied into the account, all in one transaction.

    **Permission:** Authenticated user
    """,
    responses={
        201: {
            "description": "Account created successfully",
            "content": {
                "application/json": {
                    "example": {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "name": "Household",
                        "type": "personal",
                        "currency": "EUR",
                        "state": "active",
                        "description": None,
                        "role": "owner",
                        "access_type": "independent",
                        "owner": {"name": "Ana", "email": "ana@example.com"},
                        "balance": {"total": "0.00"},
                        "created_at": "2025-11-04T00:00:00Z",
                        "updated_at": "2025-11-04T00:00:00Z",
                    }
                }
            },
        },
        401: {"description": "Not authenticated", "model": ErrorResponse},
        422: {"description": "Validation error (e.g. unsupported currency)"},
    },
)
async def create_account(
    account_data: AccountCreate,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> AccountResponse:
    """
    Create new account for authenticated user.

    Request body:
        - name: Account name (1-100 characters)
        - type: personal, business, savings or shared
        - currency: Supported ISO 4217 code (defaults to DEFAULT_CURRENCY)
        - description: Notes (optional)
    """
    return await account_service.create_account(current_user, account_data)


@router.get(
    "",
    response_model=list[AccountResponse],
    summary="List user's accounts",
    description="""
    List the accounts the caller is a member of, with their role, the owner
    and the confirmed balance.

    Admins may pass `all=true` to list every account.
    """,
)
async def list_accounts(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
    filters: AccountFilterParams = Depends(),
) -> list[AccountResponse]:
    """
    Query parameters:
        - state: active or archived (optional)
        - type: account type (optional)
        - all: every account (admins only)
    """
    return await account_service.list_accounts(current_user, filters)


@router.get(
    "/{account_id}",
    response_model=AccountDetailResponse,
    summary="Get account by ID",
    description="Get account details with members and confirmed totals.",
    responses=ACCESS_RESPONSES,
)
async def get_account(
    account_id: uuid.UUID,
    current_user: CurrentUser,
    access: ViewAccess,
    account_service: AccountServiceDep,
) -> AccountDetailResponse:
    return await account_service.get_account(current_user, account_id, access)


@router.put(
    "/{account_id}",
    response_model=AccountUpdateResponse,
    summary="Update account",
    description="""
    Update name, type, currency, state and/or description.

    Changing the currency converts every movement and event amount of the
    account into the new currency in the same transaction.

    **Permission:** Account owner or admin
    """,
    responses=ACCESS_RESPONSES,
)
async def update_account(
    account_id: uuid.UUID,
    update_data: AccountUpdate,
    current_user: CurrentUser,
    access: EditAccess,
    account_service: AccountServiceDep,
) -> AccountUpdateResponse:
    """
    Update account.

    Raises:
        - 403 Forbidden: Caller is not the owner, or the account is archived
        - 404 Not Found: Account doesn't exist or caller has no access
    """
    return await account_service.update_account(current_user, account_id, update_data, access)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Archive account",
    description="""
    Archive (soft delete) an account. Nothing is removed; the account stays
    readable and reportable but refuses every change.

    **Permission:** Account owner or admin
    """,
    responses=ACCESS_RESPONSES,
)
async def archive_account(
    account_id: uuid.UUID,
    current_user: CurrentUser,
    access: DeleteAccess,
    account_service: AccountServiceDep,
) -> None:
    await account_service.archive_account(current_user, account_id, access)


# ============================================================================
# Members
# ============================================================================


@router.get(
    "/{account_id}/members",
    response_model=list[MemberResponse],
    summary="List account members",
    responses=ACCESS_RESPONSES,
)
async def list_members(
    account_id: uuid.UUID,
    access: ViewAccess,
    account_service: AccountServiceDep,
) -> list[MemberResponse]:
    """List every membership of the account, owner first."""
    return await account_service.list_members(account_id)


@router.post(
    "/{account_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite member",
    description="""
    Share the account with an existing user, looked up by email.

    The role defaults to `editor`; `owner` can never be granted.

    **Permission:** Account owner or admin
    """,
    responses={
        **ACCESS_RESPONSES,
        400: {"description": "User is already a member", "model": ErrorResponse},
    },
)
async def invite_member(
    account_id: uuid.UUID,
    invite_data: MemberInvite,
    current_user: CurrentUser,
    access: InviteAccess,
    account_service: AccountServiceDep,
) -> MemberResponse:
    """
    Raises:
        - 400 Bad Request: User is already a member
        - 404 Not Found: No user with that email
    """
    return await account_service.invite_member(current_user, account_id, invite_data, access)


@router.put(
    "/{account_id}/members/{user_id}",
    response_model=MemberResponse,
    summary="Change member role",
    responses={
        **ACCESS_RESPONSES,
        400: {"description": "The owner membership cannot be modified", "model": ErrorResponse},
    },
)
async def change_member_role(
    account_id: uuid.UUID,
    user_id: uuid.UUID,
    role_data: MemberRoleUpdate,
    current_user: CurrentUser,
    access: InviteAccess,
    account_service: AccountServiceDep,
) -> MemberResponse:
    return await account_service.change_member_role(
        current_user, account_id, user_id, role_data, access
    )


@router.delete(
    "/{account_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove member",
    responses={
        **ACCESS_RESPONSES,
        400: {"description": "The owner membership cannot be removed", "model": ErrorResponse},
    },
)
async def remove_member(
    account_id: uuid.UUID,
    user_id: uuid.UUID,
    current_user: CurrentUser,
    access: InviteAccess,
    account_service: AccountServiceDep,
) -> None:
    await account_service.remove_member(current_user, account_id, user_id, access)
