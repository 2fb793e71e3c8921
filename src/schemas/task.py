"""
Task Pydantic schemas for API request/response handling.

This module provides:
- Task creation, update and status-change schemas
- Task responses with history
- Task filtering and summary schemas
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.enums import TaskPriority, TaskState


class TaskCreate(BaseModel):
    """
    Schema for task creation.

    New tasks always start as ``pending``.

    Attributes:
        title: Task title
        description: Longer description
        start_at: When work starts
        end_at: Due date
        list_name: List the task belongs to
        priority: low, medium or high
        account_id: Optional related account (needs create permission there)
        assignee_id: Optional user the task is assigned to
        category_id: Optional related category
    """

    title: str = Field(
        min_length=1,
        max_length=255,
        description="Task title",
        examples=["Pay electricity bill"],
    )
    description: str | None = Field(default=None)
    start_at: datetime | None = Field(default=None)
    end_at: datetime | None = Field(default=None, description="Due date")
    list_name: str = Field(default="general", min_length=1, max_length=100)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    account_id: uuid.UUID | None = Field(default=None)
    assignee_id: uuid.UUID | None = Field(default=None)
    category_id: uuid.UUID | None = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        """Trim whitespace and reject empty titles."""
        value = value.strip()
        if not value:
            raise ValueError("Task title cannot be empty or only whitespace")
        return value

    @model_validator(mode="after")
    def validate_dates(self) -> "TaskCreate":
        """End date cannot precede start date."""
        if self.start_at and self.end_at and self.end_at < self.start_at:
            raise ValueError("end_at must be on or after start_at")
        return self


class TaskUpdate(BaseModel):
    """
    Schema for updating a task.

    All fields are optional. A change of ``state`` is recorded in the
    task history.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    state: TaskState | None = None
    list_name: str | None = Field(default=None, min_length=1, max_length=100)
    priority: TaskPriority | None = None
    assignee_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Task title cannot be empty or only whitespace")
        return value


class TaskStatusChange(BaseModel):
    """
    Schema for moving a task to another state.

    Attributes:
        state: Target state (must differ from the current one)
        comment: Optional note stored in the history entry
    """

    state: TaskState = Field(description="New state")
    comment: str | None = Field(default=None, max_length=500)


class TaskHistoryResponse(BaseModel):
    """One entry of a task's state history."""

    id: uuid.UUID
    previous_state: TaskState | None = None
    new_state: TaskState
    user_id: uuid.UUID | None = None
    comment: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    """
    Schema for task response.

    Attributes:
        id: Task UUID
        user_id: Owner
        account_id: Related account
        title: Task title
        description: Longer description
        start_at: Start
        end_at: Due date
        state: Current state
        list_name: List name
        priority: Priority
        assignee_id: Assigned user
        category_id: Related category
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: uuid.UUID
    user_id: uuid.UUID
    account_id: uuid.UUID | None = None
    title: str
    description: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    state: TaskState
    list_name: str
    priority: TaskPriority
    assignee_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskDetailResponse(TaskResponse):
    """Task with its full state history, oldest entry first."""

    history: list[TaskHistoryResponse] = Field(default_factory=list)


class TaskStatusResponse(BaseModel):
    """Result of a status change."""

    message: str
    task_id: uuid.UUID
    previous_state: TaskState
    new_state: TaskState


class TaskFilterParams(BaseModel):
    """
    Query parameters for the task list.

    Attributes:
        state: Only tasks in this state
        list_name: Only tasks of this list
        priority: Only tasks of this priority
        account_id: Only tasks related to this account
    """

    state: TaskState | None = None
    list_name: str | None = Field(default=None, max_length=100)
    priority: TaskPriority | None = None
    account_id: uuid.UUID | None = None


class TaskSummary(BaseModel):
    """
    Counts of the caller's tasks.

    Attributes:
        total: All tasks
        pending / in_progress / completed / cancelled: Per-state counts
        high_priority: Open tasks with high priority
        overdue: Open tasks whose due date has passed
    """

    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    high_priority: int
    overdue: int
