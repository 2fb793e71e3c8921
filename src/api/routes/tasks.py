"""
Task API routes.

Tasks belong to the caller; other users' tasks answer 404.

This module provides:
- GET /api/v1/tasks - List tasks (filtered, paginated)
- GET /api/v1/tasks/summary - Counters by state, high priority and overdue
- POST /api/v1/tasks - Create task
- GET /api/v1/tasks/{task_id} - Get task with history
- PUT /api/v1/tasks/{task_id} - Update task
- PUT /api/v1/tasks/{task_id}/status - Change state
- DELETE /api/v1/tasks/{task_id} - Delete task
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from src.api.dependencies import CurrentUser, TaskServiceDep
from src.schemas.common import PaginatedResponse, PaginationParams
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

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get(
    "",
    response_model=PaginatedResponse[TaskResponse],
    summary="List tasks",
    description="List the caller's tasks by priority (high first), then end date.",
)
async def list_tasks(
    current_user: CurrentUser,
    task_service: TaskServiceDep,
    filters: TaskFilterParams = Depends(),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[TaskResponse]:
    return await task_service.list_tasks(current_user, filters, pagination)


@router.get("/summary", response_model=TaskSummary, summary="Task summary")
async def get_task_summary(
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> TaskSummary:
    """Counts by state plus open high-priority and overdue tasks."""
    return await task_service.get_summary(current_user)


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    description="""
    Create a task in state `pending` with a first history entry.

    When `account_id` is given the caller needs the `create` permission on
    that account.
    """,
)
async def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> TaskDetailResponse:
    task = await task_service.create_task(current_user, task_data)
    return TaskDetailResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskDetailResponse, summary="Get task")
async def get_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> TaskDetailResponse:
    task = await task_service.get_task(current_user, task_id)
    return TaskDetailResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskDetailResponse, summary="Update task")
async def update_task(
    task_id: uuid.UUID,
    task_data: TaskUpdate,
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> TaskDetailResponse:
    task = await task_service.update_task(current_user, task_id, task_data)
    return TaskDetailResponse.model_validate(task)


@router.put(
    "/{task_id}/status",
    response_model=TaskStatusResponse,
    summary="Change task state",
    description="Moving a task to the state it is already in returns 400.",
)
async def change_task_status(
    task_id: uuid.UUID,
    status_data: TaskStatusChange,
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> TaskStatusResponse:
    return await task_service.change_status(current_user, task_id, status_data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete task")
async def delete_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    task_service: TaskServiceDep,
) -> None:
    await task_service.delete_task(current_user, task_id)
