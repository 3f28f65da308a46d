"""Initial schema: principal, organization, membership, task, expense

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the access-control tables and the two reference collections.

    Organization references on principal are plain UUID columns without a
    foreign key; they are repaired by the application when a membership
    is removed.
    """
    op.create_table(
        'principal',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_account_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_platform_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('active_organization_id', sa.Uuid(), nullable=True),
        sa.Column('default_organization_id', sa.Uuid(), nullable=True),
        sa.Column('preferences', sa.JSON(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('setup_token', sa.String(64), nullable=True),
        sa.Column('setup_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reset_token', sa.String(64), nullable=True),
        sa.Column('reset_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_principal_email', 'principal', ['email'], unique=True)
    op.create_index('ix_principal_setup_token', 'principal', ['setup_token'])
    op.create_index('ix_principal_reset_token', 'principal', ['reset_token'])

    op.create_table(
        'organization',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('created_by_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=False),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='Asia/Kolkata'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='INR'),
        sa.Column('settings', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_organization_created_by_id', 'organization', ['created_by_id'])

    op.create_table(
        'membership',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('principal_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=False),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organization.id'), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending_user_setup'),
        sa.Column('invited_by_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        'ix_membership_principal_organization',
        'membership',
        ['principal_id', 'organization_id'],
        unique=True,
    )
    op.create_index('ix_membership_organization_status', 'membership', ['organization_id', 'status'])
    op.create_index('ix_membership_principal_status', 'membership', ['principal_id', 'status'])

    op.create_table(
        'task',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organization.id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='todo'),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('assigned_to_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=True),
        sa.Column('created_by_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_task_organization_id', 'task', ['organization_id'])
    op.create_index('ix_task_organization_status', 'task', ['organization_id', 'status'])
    op.create_index('ix_task_organization_assignee', 'task', ['organization_id', 'assigned_to_id'])

    op.create_table(
        'expense',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organization.id'), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('vendor', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('payment_method', sa.String(30), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='INR'),
        sa.Column('recorded_by_id', sa.Uuid(), sa.ForeignKey('principal.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_expense_organization_id', 'expense', ['organization_id'])
    op.create_index('ix_expense_organization_date', 'expense', ['organization_id', 'expense_date'])
    op.create_index('ix_expense_organization_category', 'expense', ['organization_id', 'category'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('expense')
    op.drop_table('task')
    op.drop_table('membership')
    op.drop_table('organization')
    op.drop_table('principal')
