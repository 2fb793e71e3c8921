"""
Enums shared by the models and the API schemas.

Every enum is a ``str`` enum with lowercase members, so the member name and
its value are the same string. SQLAlchemy stores enum columns by name, which
keeps the database values identical to what the API accepts and returns.

This module defines:
- UserRole / UserState: global role and login state of a user
- AccountType / AccountState: kind of ledger and its lifecycle state
- AccountRole / AccessType: a user's role on one account and how they got it
- CategoryType: which movement types a category applies to
- MovementType / MovementOrigin / MovementState
- DocumentType / DocumentOrigin
- TaskState / TaskPriority
- EventType / Recurrence / ReminderChannel
- ReportPeriod: grouping used by the totals report
"""

import enum


class _KeyLabelMixin:
    """Adds ``to_dict_list`` for select boxes in the frontend."""

    @classmethod
    def to_dict_list(cls) -> list[dict[str, str]]:
        """
        Return list of dicts with 'key' and 'label' for API responses.

        Example:
            [
                {"key": "pending_review", "label": "Pending Review"},
                {"key": "confirmed", "label": "Confirmed"}
            ]
        """
        return [
            {"key": item.value, "label": item.value.replace("_", " ").title()}
            for item in cls  # type: ignore[attr-defined]
        ]


class UserRole(_KeyLabelMixin, str, enum.Enum):
    """
    Global role of a user.

    Attributes:
        ordinary: Regular user; reaches accounts only through memberships
        admin: Administrator; bypasses account memberships and manages users
    """

    ordinary = "ordinary"
    admin = "admin"


class UserState(_KeyLabelMixin, str, enum.Enum):
    """
    Login state of a user.

    Attributes:
        active: Can log in and use tokens
        blocked: Login and existing tokens are refused with 403
    """

    active = "active"
    blocked = "blocked"


class AccountType(_KeyLabelMixin, str, enum.Enum):
    """Kind of ledger; informational only."""

    personal = "personal"
    business = "business"
    savings = "savings"
    shared = "shared"


class AccountState(_KeyLabelMixin, str, enum.Enum):
    """
    Lifecycle state of an account.

    Attributes:
        active: Normal state
        archived: Read-only; any operation needing ``edit`` is refused.
            Archiving never deletes rows.
    """

    active = "active"
    archived = "archived"


class AccountRole(_KeyLabelMixin, str, enum.Enum):
    """
    A user's role on one account.

    Hierarchy (highest to lowest):
        owner > editor > readonly

    Permission Matrix:
        | Permission         | Owner | Editor | Readonly |
        |--------------------|-------|--------|----------|
        | view               |   ✓   |   ✓    |    ✓     |
        | create             |   ✓   |   ✓    |    ✗     |
        | edit               |   ✓   |   ✓    |    ✗     |
        | delete             |   ✓   |   ✗    |    ✗     |
        | manage_categories  |   ✓   |   ✗    |    ✗     |
        | invite_users       |   ✓   |   ✗    |    ✗     |
        | view_reports       |   ✓   |   ✓    |    ✓     |

    Exactly one owner per account (the creator). The owner membership is
    assigned at creation and can never be changed or removed.
    """

    owner = "owner"
    editor = "editor"
    readonly = "readonly"


class AccessType(_KeyLabelMixin, str, enum.Enum):
    """How a member reached the account: created it, or was invited."""

    independent = "independent"
    shared = "shared"


class CategoryType(_KeyLabelMixin, str, enum.Enum):
    """Movement types a category applies to (``both`` matches either)."""

    income = "income"
    expense = "expense"
    both = "both"


class MovementType(_KeyLabelMixin, str, enum.Enum):
    """
    Direction of a movement.

    Amounts are always positive; the type decides whether a movement adds
    to or subtracts from the balance.
    """

    income = "income"
    expense = "expense"


class MovementOrigin(_KeyLabelMixin, str, enum.Enum):
    """Where a movement came from."""

    manual = "manual"
    scanned = "scanned"


class MovementState(_KeyLabelMixin, str, enum.Enum):
    """
    Review state of a movement.

    Only ``confirmed`` movements count toward balances and reports.
    """

    confirmed = "confirmed"
    pending_review = "pending_review"


class DocumentType(_KeyLabelMixin, str, enum.Enum):
    """File type of an attached document, derived from its extension."""

    image = "image"
    pdf = "pdf"
    other = "other"


class DocumentOrigin(_KeyLabelMixin, str, enum.Enum):
    """How a document was attached."""

    photo = "photo"
    manual_upload = "manual_upload"


class TaskState(_KeyLabelMixin, str, enum.Enum):
    """Progress state of a task."""

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class TaskPriority(_KeyLabelMixin, str, enum.Enum):
    """Task priority; lists sort high first."""

    low = "low"
    medium = "medium"
    high = "high"


class EventType(_KeyLabelMixin, str, enum.Enum):
    """
    Kind of calendar event.

    Payment events created from a movement are ``recurring_payment`` when
    they recur and ``one_time_payment`` otherwise; reminders created without
    an event get a ``generic_reminder`` event.
    """

    one_time_payment = "one_time_payment"
    recurring_payment = "recurring_payment"
    generic_reminder = "generic_reminder"


class Recurrence(_KeyLabelMixin, str, enum.Enum):
    """Recurrence rule of a calendar event."""

    none = "none"
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"
    custom = "custom"


class ReminderChannel(_KeyLabelMixin, str, enum.Enum):
    """Delivery channel of a reminder."""

    app = "app"
    email = "email"
    sms = "sms"


class ReportPeriod(_KeyLabelMixin, str, enum.Enum):
    """Grouping used by the totals-by-period report."""

    month = "month"
    quarter = "quarter"
    year = "year"
