"""
Account lifecycle service.

This module provides:
- Create account (owner membership and private category copies, atomically)
- List the caller's accounts and get account details with balances
- Update account, converting every stored amount when the currency changes
- Archive account (state transition, nothing is deleted)
- Member management: list, invite, change role, remove

Routes authorize the caller through ``PermissionService`` before calling in
here and pass the resulting ``Granted``. Structural changes (update,
archive, members) additionally require the owner role; admins are granted
the owner role by the permission service.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.database import transaction_scope
from src.exceptions import (
    AlreadyMemberError,
    CannotModifyOwnerError,
    InsufficientPermissionsError,
    InvalidInputError,
    NotFoundError,
    UserNotFoundError,
)
from src.models.account import Account, Membership
from src.models.category import Category
from src.models.enums import AccessType, AccountRole, AccountState, MovementType
from src.models.user import User
from src.repositories.account_repository import AccountRepository
from src.repositories.calendar_repository import CalendarEventRepository
from src.repositories.category_repository import CategoryRepository
from src.repositories.membership_repository import MembershipRepository
from src.repositories.movement_repository import MovementRepository
from src.repositories.user_repository import UserRepository
from src.schemas.account import (
    AccountBalance,
    AccountBalanceBreakdown,
    AccountCreate,
    AccountDetailResponse,
    AccountFilterParams,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    AccountUpdateResponse,
    MemberInvite,
    MemberResponse,
    MemberRoleUpdate,
)
from src.schemas.user import UserSummary
from src.services.currency_service import CurrencyService, round2
from src.services.permission_service import Granted

logger = logging.getLogger(__name__)


class AccountService:
    """
    Service class for account lifecycle operations.

    This service handles:
    - Account creation with category seeding
    - Account listing and details (memberships, owner, confirmed balance)
    - Account updates with all-or-nothing currency conversion
    - Archiving
    - Membership management that never touches the owner membership

    Multi-row writes run inside ``transaction_scope``; a failure at any
    step rolls back every row written by the operation.
    """

    def __init__(
        self,
        session: AsyncSession,
        currency_service: CurrencyService | None = None,
    ):
        """
        Initialize AccountService.

        Args:
            session: Async database session
            currency_service: Converter used on currency changes
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.membership_repo = MembershipRepository(session)
        self.category_repo = CategoryRepository(session)
        self.movement_repo = MovementRepository(session)
        self.event_repo = CalendarEventRepository(session)
        self.user_repo = UserRepository(session)
        self.currency_service = currency_service or CurrencyService()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_owner(user: User, account_id: uuid.UUID, access: Granted, action: str) -> None:
        if access.role != AccountRole.owner:
            logger.warning(
                f"User {user.id} ({access.role.value}) attempted to {action} "
                f"account {account_id}"
            )
            raise InsufficientPermissionsError(
                message=f"Only the account owner can {action} the account",
                details={"required_role": AccountRole.owner.value},
            )

    async def _get_account(self, account_id: uuid.UUID) -> Account:
        # Admins pass the permission check without a membership, so the
        # account itself may still be missing.
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account")
        return account

    @staticmethod
    def _to_response(
        account: Account,
        role: AccountRole,
        access_type: AccessType,
        owner: User,
        balance: Decimal,
    ) -> AccountResponse:
        return AccountResponse(
            id=account.id,
            name=account.name,
            type=account.type,
            currency=account.currency,
            state=account.state,
            description=account.description,
            role=role,
            access_type=access_type,
            owner=UserSummary(name=owner.name, email=owner.email),
            balance=AccountBalance(total=round2(balance)),
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    @staticmethod
    def _to_member(membership: Membership) -> MemberResponse:
        return MemberResponse(
            user_id=membership.user_id,
            name=membership.user.name,
            email=membership.user.email,
            role=membership.role,
            access_type=membership.access_type,
            joined_at=membership.created_at,
        )

    async def _seed_categories(self, account_id: uuid.UUID) -> list[Category]:
        """
        Copy every global category into a new account.

        The copies are independent rows; later edits to a global category
        do not reach them.
        """
        global_categories = await self.category_repo.list_globals()
        copies = [
            Category(
                account_id=account_id,
                name=template.name,
                type=template.type,
                display_order=template.display_order,
                icon=template.icon,
                color=template.color,
                is_global=False,
            )
            for template in global_categories
        ]
        if copies:
            await self.category_repo.add_all(copies)
        return copies

    async def _convert_amounts(
        self, account_id: uuid.UUID, from_currency: str, to_currency: str
    ) -> tuple[int, int]:
        """
        Re-denominate every amount stored under an account.

        Movements first, then calendar events that carry an amount. Rows
        keep their ids; ``updated_at`` is refreshed on flush. All movement
        amounts are converted before any row is touched, so an amount that
        would round down to nothing leaves the account unchanged.

        Returns:
            (movements converted, events converted)

        Raises:
            InvalidInputError: If a movement amount would convert to 0.00
        """
        movements = await self.movement_repo.list_by_account(account_id)
        converted = [
            self.currency_service.convert(movement.amount, from_currency, to_currency)
            for movement in movements
        ]
        too_small = [m for m, amount in zip(movements, converted) if amount <= 0]
        if too_small:
            logger.warning(
                f"Conversion of account {account_id} to {to_currency} refused: "
                f"{len(too_small)} movements would round to zero"
            )
            raise InvalidInputError(
                field="currency",
                message=(
                    f"{len(too_small)} movement amounts are too small to convert "
                    f"from {from_currency} to {to_currency}"
                ),
                details={"movement_ids": [str(m.id) for m in too_small]},
            )

        for movement, amount in zip(movements, converted):
            movement.amount = amount
        await self.session.flush()

        events = await self.event_repo.list_with_amount(account_id)
        for event in events:
            event.amount = self.currency_service.convert(
                event.amount, from_currency, to_currency
            )
        await self.session.flush()

        return len(movements), len(events)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def create_account(self, user: User, data: AccountCreate) -> AccountResponse:
        """
        Create an account owned by ``user``.

        In one transaction: insert the account (``active``), insert the
        owner membership (``independent``) and copy every global category
        into the account.

        Args:
            user: Creator, who becomes the owner
            data: Account details

        Returns:
            Account projection with the caller's role and a zero balance

        Example:
            account = await account_service.create_account(
                user, AccountCreate(name="Household", currency="EUR")
            )
        """
        currency = data.currency or settings.default_currency

        async with transaction_scope(self.session):
            account = await self.account_repo.add(
                Account(
                    name=data.name,
                    type=data.type,
                    currency=currency,
                    owner_id=user.id,
                    state=AccountState.active,
                    description=data.description,
                    created_by=user.id,
                    updated_by=user.id,
                )
            )
            await self.membership_repo.add(
                Membership(
                    user_id=user.id,
                    account_id=account.id,
                    role=AccountRole.owner,
                    access_type=AccessType.independent,
                )
            )
            seeded = await self._seed_categories(account.id)

        logger.info(
            f"Created account {account.id} ({account.name}, {account.currency}) "
            f"for user {user.id} with {len(seeded)} seeded categories"
        )

        return self._to_response(
            account,
            role=AccountRole.owner,
            access_type=AccessType.independent,
            owner=user,
            balance=Decimal("0"),
        )

    async def list_accounts(
        self, user: User, filters: AccountFilterParams
    ) -> list[AccountResponse]:
        """
        List the accounts the user is a member of.

        Admins passing ``all=True`` get every account; on accounts where
        they hold no membership they are shown with the implicit owner role.

        Args:
            user: Caller
            filters: State/type filters and the admin ``all`` flag

        Returns:
            Account projections with confirmed balances, newest first
        """
        rows: list[tuple[Account, AccountRole, AccessType]] = []

        if filters.all and user.is_admin:
            accounts = await self.account_repo.list_all(
                state=filters.state, account_type=filters.type
            )
            for account in accounts:
                membership = next(
                    (m for m in account.memberships if m.user_id == user.id), None
                )
                if membership is None:
                    rows.append((account, AccountRole.owner, AccessType.independent))
                else:
                    rows.append((account, membership.role, membership.access_type))
        else:
            pairs = await self.account_repo.list_for_user(
                user.id, state=filters.state, account_type=filters.type
            )
            rows = [
                (account, membership.role, membership.access_type)
                for account, membership in pairs
            ]

        totals = await self.movement_repo.confirmed_totals([row[0].id for row in rows])

        return [
            self._to_response(
                account,
                role=role,
                access_type=access_type,
                owner=account.owner,
                balance=totals[account.id][MovementType.income]
                - totals[account.id][MovementType.expense],
            )
            for account, role, access_type in rows
        ]

    async def get_account(
        self, user: User, account_id: uuid.UUID, access: Granted
    ) -> AccountDetailResponse:
        """
        Get an account with its members and confirmed totals.

        Args:
            user: Caller
            account_id: Account to load
            access: Result of the caller's ``view`` check

        Raises:
            NotFoundError: If the account does not exist (admin callers)
        """
        account = await self._get_account(account_id)
        memberships = await self.membership_repo.list_by_account(account_id)
        own = next((m for m in memberships if m.user_id == user.id), None)

        totals = (await self.movement_repo.confirmed_totals([account_id]))[account_id]
        income = round2(totals[MovementType.income])
        expenses = round2(totals[MovementType.expense])

        base = self._to_response(
            account,
            role=access.role,
            access_type=own.access_type if own else AccessType.independent,
            owner=account.owner,
            balance=income - expenses,
        )
        return AccountDetailResponse(
            **base.model_dump(),
            members=[self._to_member(m) for m in memberships],
            totals=AccountBalanceBreakdown(
                total_income=income,
                total_expenses=expenses,
                balance=income - expenses,
            ),
        )

    async def update_account(
        self,
        user: User,
        account_id: uuid.UUID,
        data: AccountUpdate,
        access: Granted,
    ) -> AccountUpdateResponse:
        """
        Update an account, converting stored amounts on a currency change.

        In one transaction:
        1. lock the account row and read its current currency;
        2. if a different currency is requested, convert every movement
           amount and then every non-null event amount in place;
        3. apply the remaining field updates;
        4. commit, or roll everything back on any failure.

        Args:
            user: Caller (must hold the owner role or be an admin)
            account_id: Account to update
            data: Fields to change
            access: Result of the caller's ``edit`` check

        Returns:
            Message, updated account fields and whether a conversion ran

        Raises:
            InsufficientPermissionsError: If the caller is not the owner
            NotFoundError: If the account does not exist (admin callers)
            InvalidInputError: If a movement amount would convert to 0.00

        Example:
            result = await account_service.update_account(
                user, account_id, AccountUpdate(currency="EUR"), access
            )
            result.currency_converted  # True if the currency was not EUR
        """
        self._require_owner(user, account_id, access, "update")

        async with transaction_scope(self.session):
            account = await self.account_repo.get_for_update(account_id)
            if account is None:
                raise NotFoundError("Account")

            old_currency = account.currency
            new_currency = data.currency or old_currency
            currency_converted = new_currency != old_currency

            if currency_converted:
                movement_count, event_count = await self._convert_amounts(
                    account.id, old_currency, new_currency
                )
                logger.info(
                    f"Converted account {account.id} from {old_currency} to "
                    f"{new_currency}: {movement_count} movements, {event_count} events"
                )
                account.currency = new_currency

            if data.name is not None:
                account.name = data.name
            if data.type is not None:
                account.type = data.type
            if data.state is not None:
                account.state = data.state
            if data.description is not None:
                account.description = data.description
            account.updated_by = user.id

            account = await self.account_repo.update(account)

        if currency_converted:
            message = (
                f"Account updated and all amounts converted from "
                f"{old_currency} to {new_currency}"
            )
        else:
            message = "Account updated successfully"

        logger.info(f"Account {account.id} updated by user {user.id}")

        return AccountUpdateResponse(
            message=message,
            account=AccountSummary.model_validate(account),
            currency_converted=currency_converted,
        )

    async def archive_account(
        self, user: User, account_id: uuid.UUID, access: Granted
    ) -> Account:
        """
        Archive an account.

        Only the state changes; movements, categories and members stay.
        An archived account refuses every operation that needs ``edit``.

        Raises:
            InsufficientPermissionsError: If the caller is not the owner
            NotFoundError: If the account does not exist (admin callers)
        """
        self._require_owner(user, account_id, access, "archive")

        account = await self._get_account(account_id)
        account.state = AccountState.archived
        account.updated_by = user.id
        account = await self.account_repo.update(account)
        await self.session.commit()

        logger.info(f"Archived account {account.id} by user {user.id}")
        return account

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def list_members(self, account_id: uuid.UUID) -> list[MemberResponse]:
        """List the members of an account, owner first."""
        await self._get_account(account_id)
        memberships = await self.membership_repo.list_by_account(account_id)
        return [self._to_member(m) for m in memberships]

    async def invite_member(
        self,
        user: User,
        account_id: uuid.UUID,
        data: MemberInvite,
        access: Granted,
    ) -> MemberResponse:
        """
        Add an existing user to an account.

        Args:
            user: Caller (owner or admin)
            account_id: Account to share
            data: Invitee email and role (editor by default, never owner)
            access: Result of the caller's ``invite_users`` check

        Raises:
            InsufficientPermissionsError: If the caller is not the owner
            UserNotFoundError: If no user has that email
            AlreadyMemberError: If the user already belongs to the account
        """
        self._require_owner(user, account_id, access, "manage members of")
        await self._get_account(account_id)

        invitee = await self.user_repo.get_by_email(data.email)
        if invitee is None:
            logger.warning(f"Invite to account {account_id} for unknown email {data.email}")
            raise UserNotFoundError(message=f"No user found with email {data.email}")

        if await self.membership_repo.get_membership(invitee.id, account_id) is not None:
            logger.warning(f"User {invitee.id} is already a member of account {account_id}")
            raise AlreadyMemberError()

        membership = await self.membership_repo.add(
            Membership(
                user_id=invitee.id,
                account_id=account_id,
                role=data.role,
                access_type=AccessType.shared,
            )
        )
        await self.session.commit()

        logger.info(
            f"User {user.id} added {invitee.id} to account {account_id} as {data.role.value}"
        )
        return self._to_member(membership)

    async def _get_non_owner_membership(
        self, account_id: uuid.UUID, member_user_id: uuid.UUID
    ) -> Membership:
        membership = await self.membership_repo.get_membership(member_user_id, account_id)
        if membership is None:
            raise NotFoundError("Member")
        if membership.role == AccountRole.owner:
            logger.warning(f"Attempt to modify owner membership of account {account_id}")
            raise CannotModifyOwnerError()
        return membership

    async def change_member_role(
        self,
        user: User,
        account_id: uuid.UUID,
        member_user_id: uuid.UUID,
        data: MemberRoleUpdate,
        access: Granted,
    ) -> MemberResponse:
        """
        Switch a member between editor and readonly.

        Raises:
            InsufficientPermissionsError: If the caller is not the owner
            NotFoundError: If the user is not a member
            CannotModifyOwnerError: If the target is the owner membership
        """
        self._require_owner(user, account_id, access, "manage members of")
        membership = await self._get_non_owner_membership(account_id, member_user_id)

        old_role = membership.role
        membership.role = data.role
        membership = await self.membership_repo.update(membership)
        await self.session.commit()

        logger.info(
            f"Member {member_user_id} of account {account_id} changed from "
            f"{old_role.value} to {data.role.value} by user {user.id}"
        )
        return self._to_member(membership)

    async def remove_member(
        self,
        user: User,
        account_id: uuid.UUID,
        member_user_id: uuid.UUID,
        access: Granted,
    ) -> None:
        """
        Remove a member from an account.

        Raises:
            InsufficientPermissionsError: If the caller is not the owner
            NotFoundError: If the user is not a member
            CannotModifyOwnerError: If the target is the owner membership
        """
        self._require_owner(user, account_id, access, "manage members of")
        membership = await self._get_non_owner_membership(account_id, member_user_id)

        await self.membership_repo.delete(membership)
        await self.session.commit()

        logger.info(f"Removed member {member_user_id} from account {account_id} by user {user.id}")
