"""
Task service.

This module provides:
- Task listing with filters and pagination (owner only)
- Task summary counters
- Create, update, change status and delete
- Append-only history of state changes

Tasks belong to the caller. A task may reference one of the caller's
accounts; creating it there requires the ``create`` permission on that
account.
"""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import transaction_scope
from src.exceptions import (
    BadRequestError,
    InvalidCategoryForAccountError,
    NotFoundError,
    UserNotFoundError,
)
from src.models.enums import TaskPriority, TaskState
from src.models.task import Task, TaskHistory
from src.models.user import User
from src.repositories.category_repository import CategoryRepository
from src.repositories.task_repository import TaskRepository
from src.repositories.user_repository import UserRepository
from src.schemas.common import PaginatedResponse, PaginationMeta, PaginationParams
from src.schemas.task import (
    TaskCreate,
    TaskFilterParams,
    TaskResponse,
    TaskStatusChange,
    TaskStatusResponse,
    TaskSummary,
    TaskUpdate,
)
from src.services.permission_service import Permission, PermissionService

logger = logging.getLogger(__name__)


class TaskService:
    """
    Service class for task operations.

    Creation and status changes write the task and its history entry in
    one transaction.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize TaskService.

        Args:
            session: Async database session
        """
        self.session = session
        self.task_repo = TaskRepository(session)
        self.user_repo = UserRepository(session)
        self.category_repo = CategoryRepository(session)
        self.permission_service = PermissionService(session)

    async def _get_owned(self, user: User, task_id: uuid.UUID) -> Task:
        task = await self.task_repo.get_owned(task_id, user.id)
        if task is None:
            raise NotFoundError("Task")
        return task

    async def _check_references(
        self,
        account_id: uuid.UUID | None,
        assignee_id: uuid.UUID | None,
        category_id: uuid.UUID | None,
    ) -> None:
        if assignee_id is not None and not await self.user_repo.exists(assignee_id):
            raise UserNotFoundError(message="Assignee not found")

        if category_id is None:
            return
        if account_id is not None:
            if not await self.category_repo.is_usable_in_account(category_id, account_id):
                raise InvalidCategoryForAccountError(details={"category_id": str(category_id)})
        elif await self.category_repo.get_global(category_id) is None:
            raise NotFoundError("Category")

    async def list_tasks(
        self,
        user: User,
        filters: TaskFilterParams,
        pagination: PaginationParams,
    ) -> PaginatedResponse[TaskResponse]:
        """
        List the caller's tasks.

        Ordered by priority (high first), then end date, then newest.
        """
        tasks, total = await self.task_repo.filter_tasks(
            user.id,
            state=filters.state,
            list_name=filters.list_name,
            priority=filters.priority,
            account_id=filters.account_id,
            offset=pagination.offset,
            limit=pagination.page_size,
        )

        return PaginatedResponse(
            data=[TaskResponse.model_validate(t) for t in tasks],
            meta=PaginationMeta.build(total, pagination),
        )

    async def get_summary(self, user: User) -> TaskSummary:
        """
        Count the caller's tasks.

        ``high_priority`` and ``overdue`` only count open tasks (pending or
        in progress); overdue means the end date has passed.
        """
        counts = await self.task_repo.count_by_state(user.id)
        high_priority = await self.task_repo.count_open(user.id, priority=TaskPriority.high)
        overdue = await self.task_repo.count_open(user.id, due_before=datetime.now(UTC))

        return TaskSummary(
            total=sum(counts.values()),
            pending=counts[TaskState.pending],
            in_progress=counts[TaskState.in_progress],
            completed=counts[TaskState.completed],
            cancelled=counts[TaskState.cancelled],
            high_priority=high_priority,
            overdue=overdue,
        )

    async def get_task(self, user: User, task_id: uuid.UUID) -> Task:
        """
        Get one of the caller's tasks with its history.

        Raises:
            NotFoundError: If the task does not exist or belongs to someone else
        """
        return await self._get_owned(user, task_id)

    async def create_task(self, user: User, data: TaskCreate) -> Task:
        """
        Create a task with its first history entry ("Task created").

        Args:
            user: Owner of the new task
            data: Task fields; ``account_id`` is optional

        Raises:
            AccessDeniedError / InsufficientPermissionsError: If the caller
                may not create in the given account
            UserNotFoundError: If the assignee does not exist
            InvalidCategoryForAccountError: If the category is not usable
        """
        if data.account_id is not None:
            await self.permission_service.require(user, data.account_id, {Permission.create})
        await self._check_references(data.account_id, data.assignee_id, data.category_id)

        async with transaction_scope(self.session):
            task = Task(user_id=user.id, state=TaskState.pending, **data.model_dump())
            task.history.append(
                TaskHistory(
                    previous_state=None,
                    new_state=TaskState.pending,
                    user_id=user.id,
                    comment="Task created",
                )
            )
            task = await self.task_repo.add(task)

        logger.info(f"User {user.id} created task {task.id} ({task.priority.value})")
        return task

    async def update_task(self, user: User, task_id: uuid.UUID, data: TaskUpdate) -> Task:
        """
        Update a task.

        A state change through this method is recorded in the history like
        one made through ``change_status``.
        """
        task = await self._get_owned(user, task_id)
        await self._check_references(task.account_id, data.assignee_id, data.category_id)

        previous_state = task.state
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field in ("description", "start_at", "end_at"):
                setattr(task, field, value)

        if task.state != previous_state:
            task.history.append(
                TaskHistory(
                    previous_state=previous_state,
                    new_state=task.state,
                    user_id=user.id,
                )
            )

        task = await self.task_repo.update(task)
        await self.session.commit()

        logger.info(f"User {user.id} updated task {task.id}")
        return task

    async def change_status(
        self, user: User, task_id: uuid.UUID, data: TaskStatusChange
    ) -> TaskStatusResponse:
        """
        Move a task to another state and record it in the history.

        Raises:
            NotFoundError: If the task is not the caller's
            BadRequestError: If the task is already in the requested state
        """
        task = await self._get_owned(user, task_id)

        previous_state = task.state
        if previous_state == data.state:
            raise BadRequestError(f"Task is already {data.state.value}")

        async with transaction_scope(self.session):
            task.state = data.state
            task.history.append(
                TaskHistory(
                    previous_state=previous_state,
                    new_state=data.state,
                    user_id=user.id,
                    comment=data.comment,
                )
            )
            await self.task_repo.update(task)

        logger.info(
            f"User {user.id} moved task {task.id} from {previous_state.value} to {data.state.value}"
        )

        return TaskStatusResponse(
            message="Task status updated successfully",
            task_id=task.id,
            previous_state=previous_state,
            new_state=data.state,
        )

    async def delete_task(self, user: User, task_id: uuid.UUID) -> None:
        """Delete a task and its history."""
        task = await self._get_owned(user, task_id)
        await self.task_repo.delete(task)
        await self.session.commit()

        logger.info(f"User {user.id} deleted task {task_id}")
