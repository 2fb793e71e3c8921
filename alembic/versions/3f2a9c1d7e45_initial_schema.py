"""Initial schema for the Ledgerline Finance API

Revision ID: 3f2a9c1d7e45
Revises:
Create Date: 2026-10-17

Enums (created before the tables that use them):
- userrole, userstate: Global role and login state of a user
- accounttype, accountstate, accountrole, accesstype: Accounts and memberships
- categorytype, movementtype, movementorigin, movementstate: Ledger entries
- documenttype, documentorigin: Movement attachments
- taskstate, taskpriority: Tasks and their history
- eventtype, recurrence, reminderchannel: Calendar

Tables Created:
- users: Accounts of people using the API
- accounts: Ledgers with a currency and an owner
- memberships: User access to an account (owner, editor, readonly)
- categories: Global templates (account_id NULL) and account copies
- tags, movements, movement_tags: Ledger entries and their labels
- documents: Files attached to movements
- calendar_events, reminders: Payment events and reminders
- tasks, task_history: Personal tasks and their state changes

Enum values are stored as their names, which equal their values.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e45'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    'userrole': ('ordinary', 'admin'),
    'userstate': ('active', 'blocked'),
    'accounttype': ('personal', 'business', 'savings', 'shared'),
    'accountstate': ('active', 'archived'),
    'accountrole': ('owner', 'editor', 'readonly'),
    'accesstype': ('independent', 'shared'),
    'categorytype': ('income', 'expense', 'both'),
    'movementtype': ('income', 'expense'),
    'movementorigin': ('manual', 'scanned'),
    'movementstate': ('confirmed', 'pending_review'),
    'documenttype': ('image', 'pdf', 'other'),
    'documentorigin': ('photo', 'manual_upload'),
    'taskstate': ('pending', 'in_progress', 'completed', 'cancelled'),
    'taskpriority': ('low', 'medium', 'high'),
    'eventtype': ('one_time_payment', 'recurring_payment', 'generic_reminder'),
    'recurrence': ('none', 'daily', 'weekly', 'monthly', 'yearly', 'custom'),
    'reminderchannel': ('app', 'email', 'sms'),
}


def _enum(name: str) -> postgresql.ENUM:
    """Reference an enum created at the start of the upgrade."""
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _id() -> sa.Column:
    return sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)


def _updated_at() -> sa.Column:
    return sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False)


def _base_indexes(table: str) -> None:
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)
    op.create_index(op.f(f'ix_{table}_created_at'), table, ['created_at'], unique=False)


def upgrade() -> None:
    """
    Upgrade schema.

    Creates every enum type, then the tables in dependency order.
    """
    # =========================================================================
    # STEP 1: Enums
    # =========================================================================
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # =========================================================================
    # STEP 2: Users and accounts
    # =========================================================================
    op.create_table(
        'users',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', _enum('userrole'), nullable=False),
        sa.Column('state', _enum('userstate'), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        _id(),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    _base_indexes('users')
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_state'), 'users', ['state'], unique=False)

    op.create_table(
        'accounts',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', _enum('accounttype'), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('state', _enum('accountstate'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _id(),
        _created_at(),
        _updated_at(),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('updated_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['owner_id'], ['users.id'],
            name=op.f('fk_accounts_owner_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts')),
    )
    _base_indexes('accounts')
    op.create_index(op.f('ix_accounts_owner_id'), 'accounts', ['owner_id'], unique=False)
    op.create_index(op.f('ix_accounts_state'), 'accounts', ['state'], unique=False)
    op.create_index(op.f('ix_accounts_created_by'), 'accounts', ['created_by'], unique=False)
    op.create_index(op.f('ix_accounts_updated_by'), 'accounts', ['updated_by'], unique=False)

    op.create_table(
        'memberships',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', _enum('accountrole'), nullable=False),
        sa.Column('access_type', _enum('accesstype'), nullable=False),
        _id(),
        _created_at(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_memberships_user_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_memberships_account_id_accounts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_memberships')),
        sa.UniqueConstraint('user_id', 'account_id', name='uq_memberships_user_account'),
    )
    _base_indexes('memberships')
    op.create_index(op.f('ix_memberships_user_id'), 'memberships', ['user_id'], unique=False)
    op.create_index(op.f('ix_memberships_account_id'), 'memberships', ['account_id'], unique=False)

    # =========================================================================
    # STEP 3: Categories, tags and movements
    # =========================================================================
    op.create_table(
        'categories',
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', _enum('categorytype'), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('icon', sa.String(length=50), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=True),
        sa.Column('is_global', sa.Boolean(), nullable=False),
        _id(),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_categories_account_id_accounts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_categories')),
    )
    _base_indexes('categories')
    op.create_index(op.f('ix_categories_account_id'), 'categories', ['account_id'], unique=False)
    op.create_index(op.f('ix_categories_is_global'), 'categories', ['is_global'], unique=False)

    op.create_table(
        'tags',
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=7), nullable=False),
        _id(),
        _created_at(),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_tags_account_id_accounts'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tags')),
        sa.UniqueConstraint('account_id', 'name', name='uq_tags_account_name'),
    )
    _base_indexes('tags')
    op.create_index(op.f('ix_tags_account_id'), 'tags', ['account_id'], unique=False)

    op.create_table(
        'movements',
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', _enum('movementtype'), nullable=False),
        sa.Column('operation_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('provider', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('origin', _enum('movementorigin'), nullable=False),
        sa.Column('state', _enum('movementstate'), nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        _id(),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint('amount > 0', name=op.f('ck_movements_amount_positive')),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_movements_account_id_accounts'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['category_id'], ['categories.id'],
            name=op.f('fk_movements_category_id_categories'), ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['created_by'], ['users.id'],
            name=op.f('fk_movements_created_by_users'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_movements')),
    )
    _base_indexes('movements')
    op.create_index(op.f('ix_movements_account_id'), 'movements', ['account_id'], unique=False)
    op.create_index(op.f('ix_movements_category_id'), 'movements', ['category_id'], unique=False)
    op.create_index(op.f('ix_movements_type'), 'movements', ['type'], unique=False)
    op.create_index(op.f('ix_movements_state'), 'movements', ['state'], unique=False)
    op.create_index(
        op.f('ix_movements_operation_date'), 'movements', ['operation_date'], unique=False
    )

    op.create_table(
        'movement_tags',
        sa.Column('movement_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('tag_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['movement_id'], ['movements.id'],
            name=op.f('fk_movement_tags_movement_id_movements'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['tag_id'], ['tags.id'],
            name=op.f('fk_movement_tags_tag_id_tags'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('movement_id', 'tag_id', name=op.f('pk_movement_tags')),
    )

    op.create_table(
        'documents',
        sa.Column('movement_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('file_url', sa.String(length=500), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=True),
        sa.Column('file_type', _enum('documenttype'), nullable=False),
        sa.Column('origin', _enum('documentorigin'), nullable=False),
        sa.Column('size_bytes', sa.Integer(), nullable=True),
        _id(),
        _created_at(),
        sa.ForeignKeyConstraint(
            ['movement_id'], ['movements.id'],
            name=op.f('fk_documents_movement_id_movements'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_documents')),
    )
    _base_indexes('documents')
    op.create_index(op.f('ix_documents_movement_id'), 'documents', ['movement_id'], unique=False)

    # =========================================================================
    # STEP 4: Calendar and tasks
    # =========================================================================
    op.create_table(
        'calendar_events',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('type', _enum('eventtype'), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('movement_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('recurrence', _enum('recurrence'), nullable=False),
        sa.Column('recurrence_config', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _id(),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_calendar_events_user_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_calendar_events_account_id_accounts'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['category_id'], ['categories.id'],
            name=op.f('fk_calendar_events_category_id_categories'), ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['movement_id'], ['movements.id'],
            name=op.f('fk_calendar_events_movement_id_movements'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_calendar_events')),
    )
    _base_indexes('calendar_events')
    op.create_index(
        op.f('ix_calendar_events_user_id'), 'calendar_events', ['user_id'], unique=False
    )
    op.create_index(
        op.f('ix_calendar_events_account_id'), 'calendar_events', ['account_id'], unique=False
    )
    op.create_index(
        op.f('ix_calendar_events_start_at'), 'calendar_events', ['start_at'], unique=False
    )

    op.create_table(
        'reminders',
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('remind_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('minutes_before', sa.Integer(), nullable=False),
        sa.Column('channel', _enum('reminderchannel'), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('sent', sa.Boolean(), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        _id(),
        _created_at(),
        sa.ForeignKeyConstraint(
            ['event_id'], ['calendar_events.id'],
            name=op.f('fk_reminders_event_id_calendar_events'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_reminders')),
    )
    _base_indexes('reminders')
    op.create_index(op.f('ix_reminders_event_id'), 'reminders', ['event_id'], unique=False)
    op.create_index(op.f('ix_reminders_remind_at'), 'reminders', ['remind_at'], unique=False)

    op.create_table(
        'tasks',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('account_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('state', _enum('taskstate'), nullable=False),
        sa.Column('list_name', sa.String(length=100), nullable=False),
        sa.Column('priority', _enum('taskpriority'), nullable=False),
        sa.Column('assignee_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=True),
        _id(),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_tasks_user_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_tasks_account_id_accounts'), ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['assignee_id'], ['users.id'],
            name=op.f('fk_tasks_assignee_id_users'), ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['category_id'], ['categories.id'],
            name=op.f('fk_tasks_category_id_categories'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_tasks')),
    )
    _base_indexes('tasks')
    op.create_index(op.f('ix_tasks_user_id'), 'tasks', ['user_id'], unique=False)
    op.create_index(op.f('ix_tasks_account_id'), 'tasks', ['account_id'], unique=False)
    op.create_index(op.f('ix_tasks_state'), 'tasks', ['state'], unique=False)

    op.create_table(
        'task_history',
        sa.Column('task_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('previous_state', _enum('taskstate'), nullable=True),
        sa.Column('new_state', _enum('taskstate'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        _id(),
        _created_at(),
        sa.ForeignKeyConstraint(
            ['task_id'], ['tasks.id'],
            name=op.f('fk_task_history_task_id_tasks'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_task_history_user_id_users'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_task_history')),
    )
    _base_indexes('task_history')
    op.create_index(op.f('ix_task_history_task_id'), 'task_history', ['task_id'], unique=False)


def downgrade() -> None:
    """Drop every table, then every enum type."""
    for table in (
        'task_history',
        'tasks',
        'reminders',
        'calendar_events',
        'documents',
        'movement_tags',
        'movements',
        'tags',
        'categories',
        'memberships',
        'accounts',
        'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
