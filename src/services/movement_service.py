"""
Movement service for income and expense entries.

This module provides:
- Search movements of an account with filters and pagination
- Get a movement with its tags and documents
- Create, update and delete movements
- Confirm movements waiting for review
- Bulk creation (rows with an unusable category are skipped)

Every movement references a category that is either global or private to
the same account; tags are resolved against the account and unknown ids
are dropped.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import transaction_scope
from src.exceptions import InvalidCategoryForAccountError, NotFoundError
from src.models.enums import MovementState
from src.models.movement import Movement
from src.models.user import User
from src.repositories.category_repository import CategoryRepository
from src.repositories.document_repository import DocumentRepository
from src.repositories.movement_repository import MovementRepository
from src.repositories.tag_repository import TagRepository
from src.schemas.common import PaginatedResponse, PaginationMeta, PaginationParams
from src.schemas.document import DocumentResponse
from src.schemas.movement import (
    MovementBulkCreate,
    MovementBulkResult,
    MovementCreate,
    MovementDetailResponse,
    MovementFilterParams,
    MovementResponse,
    MovementUpdate,
)

logger = logging.getLogger(__name__)


class MovementService:
    """
    Service class for movement operations.

    This service handles:
    - Category validation against the account
    - Tag resolution scoped to the account
    - Review workflow (pending_review -> confirmed)

    Only confirmed movements count toward balances and reports.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize MovementService.

        Args:
            session: Async database session
        """
        self.session = session
        self.movement_repo = MovementRepository(session)
        self.category_repo = CategoryRepository(session)
        self.tag_repo = TagRepository(session)
        self.document_repo = DocumentRepository(session)

    async def _check_category(self, account_id: uuid.UUID, category_id: uuid.UUID) -> None:
        if not await self.category_repo.is_usable_in_account(category_id, account_id):
            logger.warning(
                f"Category {category_id} is not usable in account {account_id}"
            )
            raise InvalidCategoryForAccountError(details={"category_id": str(category_id)})

    async def get_movement(self, account_id: uuid.UUID, movement_id: uuid.UUID) -> Movement:
        """
        Get a movement of the account.

        Raises:
            NotFoundError: If the movement does not belong to the account
        """
        movement = await self.movement_repo.get_in_account(movement_id, account_id)
        if movement is None:
            raise NotFoundError("Movement")
        return movement

    async def list_movements(
        self,
        account_id: uuid.UUID,
        filters: MovementFilterParams,
        pagination: PaginationParams,
    ) -> PaginatedResponse[MovementResponse]:
        """
        Search the movements of an account.

        Args:
            account_id: Account to search in
            filters: Type, state, category, date range, provider and free text
            pagination: Page and page size

        Returns:
            PaginatedResponse with movements, newest operation date first
        """
        movements, total = await self.movement_repo.search(
            account_id,
            movement_type=filters.type,
            state=filters.state,
            category_id=filters.category_id,
            date_from=filters.date_from,
            date_to=filters.date_to,
            provider=filters.provider,
            search=filters.search,
            offset=pagination.offset,
            limit=pagination.page_size,
        )

        return PaginatedResponse(
            data=[MovementResponse.model_validate(m) for m in movements],
            meta=PaginationMeta.build(total, pagination),
        )

    async def get_movement_detail(
        self, account_id: uuid.UUID, movement_id: uuid.UUID
    ) -> MovementDetailResponse:
        """Get a movement with its category, tags and documents."""
        movement = await self.get_movement(account_id, movement_id)
        documents = await self.document_repo.list_by_movement(movement.id)

        base = MovementResponse.model_validate(movement)
        return MovementDetailResponse(
            **base.model_dump(),
            documents=[DocumentResponse.model_validate(d) for d in documents],
        )

    async def create_movement(
        self, user: User, account_id: uuid.UUID, data: MovementCreate
    ) -> Movement:
        """
        Record a movement in an account.

        Args:
            user: Caller, stored as ``created_by``
            account_id: Target account
            data: Movement fields plus optional tag ids

        Raises:
            InvalidCategoryForAccountError: If the category is neither global
                nor private to the account

        Example:
            movement = await movement_service.create_movement(
                user,
                account.id,
                MovementCreate(
                    type=MovementType.expense,
                    operation_date=date(2024, 3, 15),
                    amount=Decimal("42.50"),
                    category_id=groceries.id,
                ),
            )
        """
        await self._check_category(account_id, data.category_id)
        tags = await self.tag_repo.get_many_in_account(data.tag_ids, account_id)

        movement = await self.movement_repo.add(
            Movement(
                account_id=account_id,
                created_by=user.id,
                tags=tags,
                **data.model_dump(exclude={"tag_ids"}),
            )
        )
        await self.session.commit()

        logger.info(
            f"User {user.id} created {movement.type.value} movement {movement.id} "
            f"of {movement.amount} in account {account_id}"
        )
        return movement

    async def update_movement(
        self,
        user: User,
        account_id: uuid.UUID,
        movement_id: uuid.UUID,
        data: MovementUpdate,
    ) -> Movement:
        """
        Update a movement.

        ``tag_ids`` replaces the tag set when given; omitted or null leaves
        the tags unchanged.

        Raises:
            NotFoundError: If the movement does not belong to the account
            InvalidCategoryForAccountError: If a new category is not usable
        """
        movement = await self.get_movement(account_id, movement_id)

        if data.category_id is not None and data.category_id != movement.category_id:
            await self._check_category(account_id, data.category_id)

        for field, value in data.model_dump(exclude_unset=True, exclude={"tag_ids"}).items():
            if value is not None or field in ("provider", "description", "notes"):
                setattr(movement, field, value)

        if data.tag_ids is not None:
            movement.tags = await self.tag_repo.get_many_in_account(data.tag_ids, account_id)

        movement = await self.movement_repo.update(movement)
        await self.session.commit()

        logger.info(f"User {user.id} updated movement {movement.id} in account {account_id}")
        return movement

    async def delete_movement(
        self, user: User, account_id: uuid.UUID, movement_id: uuid.UUID
    ) -> None:
        """Delete a movement together with its documents and tag links."""
        movement = await self.get_movement(account_id, movement_id)
        await self.movement_repo.delete(movement)
        await self.session.commit()

        logger.info(f"User {user.id} deleted movement {movement_id} from account {account_id}")

    async def confirm_movement(
        self, user: User, account_id: uuid.UUID, movement_id: uuid.UUID
    ) -> Movement:
        """
        Move a movement from ``pending_review`` to ``confirmed``.

        Raises:
            NotFoundError: If the movement is missing or not pending review
        """
        movement = await self.movement_repo.get_in_account(movement_id, account_id)
        if movement is None or movement.state != MovementState.pending_review:
            raise NotFoundError(message="Movement not found or already confirmed")

        movement.state = MovementState.confirmed
        movement = await self.movement_repo.update(movement)
        await self.session.commit()

        logger.info(f"User {user.id} confirmed movement {movement.id}")
        return movement

    async def bulk_create_movements(
        self, user: User, account_id: uuid.UUID, data: MovementBulkCreate
    ) -> MovementBulkResult:
        """
        Create several movements in one transaction.

        Rows whose category is not usable in the account are skipped rather
        than failing the batch.

        Returns:
            Count and ids of the movements actually created
        """
        usable: dict[uuid.UUID, bool] = {}
        movements: list[Movement] = []

        async with transaction_scope(self.session):
            for item in data.movements:
                if item.category_id not in usable:
                    usable[item.category_id] = await self.category_repo.is_usable_in_account(
                        item.category_id, account_id
                    )
                if not usable[item.category_id]:
                    continue
                movements.append(
                    Movement(account_id=account_id, created_by=user.id, **item.model_dump())
                )

            if movements:
                await self.movement_repo.add_all(movements)

        skipped = len(data.movements) - len(movements)
        logger.info(
            f"User {user.id} bulk-created {len(movements)} movements in account "
            f"{account_id} ({skipped} skipped)"
        )

        return MovementBulkResult(
            message=f"{len(movements)} movements created successfully",
            count=len(movements),
            ids=[m.id for m in movements],
        )
