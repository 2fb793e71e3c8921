"""
Generic repository.

``BaseRepository[ModelType]`` holds the session and the primary-key lookups
every table needs; entity repositories subclass it and add their own queries.

Repositories never commit. ``add``/``update``/``delete`` flush so that ids,
defaults and constraint violations surface immediately, and the service
decides when the unit of work ends (``session.commit()`` or
``transaction_scope``).
"""

import uuid
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Primary-key access for one mapped class.

    Usage:
        class TagRepository(BaseRepository[Tag]):
            def __init__(self, session: AsyncSession):
                super().__init__(Tag, session)

            async def get_by_name(self, account_id, name) -> Tag | None:
                ...
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get_by_id(self, id: uuid.UUID) -> ModelType | None:
        return await self.session.get(self.model, id)

    async def get_for_update(self, id: uuid.UUID) -> ModelType | None:
        """
        Load a row with ``SELECT ... FOR UPDATE``.

        The lock is held until the surrounding transaction ends; concurrent
        callers block on the same row. ``populate_existing`` refreshes an
        instance already in the identity map with the locked values. Backends
        without row locks (SQLite) ignore the clause.
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def exists(self, id: uuid.UUID) -> bool:
        stmt = select(select(self.model.id).where(self.model.id == id).exists())
        return bool((await self.session.execute(stmt)).scalar())

    async def add(self, instance: ModelType) -> ModelType:
        """Insert, flush and reload server-side values (ids, timestamps)."""
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def add_all(self, instances: list[ModelType]) -> list[ModelType]:
        """Insert several rows in one flush; instances are not reloaded."""
        self.session.add_all(instances)
        await self.session.flush()
        return instances

    async def update(self, instance: ModelType) -> ModelType:
        """
        Flush attribute changes already made on ``instance`` and reload it.

        Example:
            account.name = "Household"
            account = await account_repo.update(account)
        """
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """
        Delete the row.

        Dependent rows follow their foreign key ``ondelete`` rule (cascade,
        set null or restrict).
        """
        await self.session.delete(instance)
        await self.session.flush()

    async def _paginate(
        self, query: Select[Any], offset: int, limit: int
    ) -> tuple[list[ModelType], int]:
        """
        Run one page of ``query`` and the total row count of the unpaged query.

        ``query`` must select ``self.model`` with its filters and ordering
        applied; ordering is dropped for the count.
        """
        count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()

        rows = await self.session.execute(query.offset(offset).limit(limit))
        return list(rows.scalars().all()), total
