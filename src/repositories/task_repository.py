"""
Task repository for database operations.

This module provides database operations for the Task model:
- Standard CRUD operations (inherited from BaseRepository)
- Filtered, paginated task listings for one user
- Per-state counters for the task summary
"""

import uuid
from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import TaskPriority, TaskState
from src.models.task import Task
from src.repositories.base import BaseRepository

OPEN_STATES = (TaskState.pending, TaskState.in_progress)


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Task, session)

    async def get_owned(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task | None:
        """Get a task only if the user owns it."""
        query = select(Task).where(Task.id == task_id, Task.user_id == user_id)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def filter_tasks(
        self,
        user_id: uuid.UUID,
        state: TaskState | None = None,
        list_name: str | None = None,
        priority: TaskPriority | None = None,
        account_id: uuid.UUID | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Task], int]:
        """
        List a user's tasks.

        Ordered by priority (high first), then by end date (tasks without
        one last), then newest first.

        Returns:
            Tuple of (tasks, total_count)
        """
        query = select(Task).where(Task.user_id == user_id)

        if state is not None:
            query = query.where(Task.state == state)
        if list_name:
            query = query.where(Task.list_name == list_name)
        if priority is not None:
            query = query.where(Task.priority == priority)
        if account_id is not None:
            query = query.where(Task.account_id == account_id)

        priority_rank = case(
            (Task.priority == TaskPriority.high, 0),
            (Task.priority == TaskPriority.medium, 1),
            else_=2,
        )
        query = query.order_by(
            priority_rank,
            Task.end_at.asc().nulls_last(),
            Task.created_at.desc(),
        )

        return await self._paginate(query, offset, limit)

    async def count_by_state(self, user_id: uuid.UUID) -> dict[TaskState, int]:
        """Count a user's tasks per state; missing states count as zero."""
        query = (
            select(Task.state, func.count())
            .where(Task.user_id == user_id)
            .group_by(Task.state)
        )

        result = await self.session.execute(query)
        counts = {state: 0 for state in TaskState}
        for state, count in result.all():
            counts[state] = count
        return counts

    async def count_open(
        self,
        user_id: uuid.UUID,
        priority: TaskPriority | None = None,
        due_before: datetime | None = None,
    ) -> int:
        """
        Count a user's open (pending or in progress) tasks.

        Args:
            user_id: Owner
            priority: Only count tasks of this priority
            due_before: Only count tasks whose end date is before this moment
        """
        query = (
            select(func.count())
            .select_from(Task)
            .where(Task.user_id == user_id, Task.state.in_(OPEN_STATES))
        )

        if priority is not None:
            query = query.where(Task.priority == priority)
        if due_before is not None:
            query = query.where(Task.end_at < due_before)

        result = await self.session.execute(query)
        return result.scalar_one()
