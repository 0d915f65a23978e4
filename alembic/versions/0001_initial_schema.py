"""initial schema: tenants, users, projects, costs, billing, budgets, invitations, attachments

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create every table."""

    op.create_table('tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('subdomain', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='active'),
        sa.Column('plan', sa.String(length=50), nullable=False, server_default='trial'),
        sa.Column('subscription_ends_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'], unique=False)
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'], unique=True)

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='entry'),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('job_number', sa.String(length=100), nullable=False),
        sa.Column('job_name', sa.String(length=255), nullable=False),
        sa.Column('customer', sa.String(length=255), nullable=False),
        sa.Column('project_type', sa.String(length=20), nullable=False, server_default='Field'),
        sa.Column('total_contract_value', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='Active'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        comment='Projects are tenant-owned construction jobs'
    )
    op.create_index('ix_projects_id', 'projects', ['id'], unique=False)
    op.create_index('ix_projects_tenant_id', 'projects', ['tenant_id'], unique=False)
    op.create_index('ix_projects_status', 'projects', ['status'], unique=False)

    op.create_table('change_orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('additional_contract_value', sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_change_orders_id', 'change_orders', ['id'], unique=False)
    op.create_index('ix_change_orders_tenant_id', 'change_orders', ['tenant_id'], unique=False)
    op.create_index('ix_change_orders_project_id', 'change_orders', ['project_id'], unique=False)

    op.create_table('employees',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('standard_rate', sa.Float(), nullable=False),
        sa.Column('ot_rate', sa.Float(), nullable=False),
        sa.Column('dt_rate', sa.Float(), nullable=False),
        sa.Column('mob', sa.Float(), nullable=True),
        sa.Column('mob_rate', sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_employees_id', 'employees', ['id'], unique=False)
    op.create_index('ix_employees_tenant_id', 'employees', ['tenant_id'], unique=False)
    op.create_index('ix_employees_project_id', 'employees', ['project_id'], unique=False)

    op.create_table('project_costs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('change_order_id', sa.Uuid(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('vendor', sa.String(length=255), nullable=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=True),
        sa.Column('in_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('employee_id', sa.Uuid(), nullable=True),
        sa.Column('employee_name', sa.String(length=255), nullable=True),
        sa.Column('st_hours', sa.Float(), nullable=True),
        sa.Column('st_rate', sa.Float(), nullable=True),
        sa.Column('ot_hours', sa.Float(), nullable=True),
        sa.Column('ot_rate', sa.Float(), nullable=True),
        sa.Column('dt_hours', sa.Float(), nullable=True),
        sa.Column('dt_rate', sa.Float(), nullable=True),
        sa.Column('per_diem', sa.Float(), nullable=True),
        sa.Column('mob_qty', sa.Float(), nullable=True),
        sa.Column('mob_rate', sa.Float(), nullable=True),
        sa.Column('subcontractor_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['change_order_id'], ['change_orders.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_project_costs_id', 'project_costs', ['id'], unique=False)
    op.create_index('ix_project_costs_tenant_id', 'project_costs', ['tenant_id'], unique=False)
    op.create_index('ix_project_costs_project_id', 'project_costs', ['project_id'], unique=False)
    op.create_index('ix_project_costs_change_order_id', 'project_costs', ['change_order_id'], unique=False)
    op.create_index('ix_project_costs_category', 'project_costs', ['category'], unique=False)
    op.create_index('ix_project_costs_employee_id', 'project_costs', ['employee_id'], unique=False)

    op.create_table('customer_invoices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('change_order_id', sa.Uuid(), nullable=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('date_billed', sa.Date(), nullable=False),
        sa.Column('in_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['change_order_id'], ['change_orders.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customer_invoices_id', 'customer_invoices', ['id'], unique=False)
    op.create_index('ix_customer_invoices_tenant_id', 'customer_invoices', ['tenant_id'], unique=False)
    op.create_index('ix_customer_invoices_project_id', 'customer_invoices', ['project_id'], unique=False)
    op.create_index('ix_customer_invoices_change_order_id', 'customer_invoices', ['change_order_id'], unique=False)

    op.create_table('project_budgets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('material_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('labor_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('equipment_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('subcontractor_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('others_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('cap_leases_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('consumable_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('updated_by', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'project_id', name='uq_project_budgets_tenant_project'),
    )
    op.create_index('ix_project_budgets_id', 'project_budgets', ['id'], unique=False)
    op.create_index('ix_project_budgets_tenant_id', 'project_budgets', ['tenant_id'], unique=False)
    op.create_index('ix_project_budgets_project_id', 'project_budgets', ['project_id'], unique=False)

    op.create_table('user_invitations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='entry'),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('invited_by', sa.Uuid(), nullable=True),
        sa.Column('invitation_token', sa.String(length=128), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_invitations_id', 'user_invitations', ['id'], unique=False)
    op.create_index('ix_user_invitations_tenant_id', 'user_invitations', ['tenant_id'], unique=False)
    op.create_index('ix_user_invitations_email', 'user_invitations', ['email'], unique=False)
    op.create_index('ix_user_invitations_status', 'user_invitations', ['status'], unique=False)
    op.create_index('ix_user_invitations_invitation_token', 'user_invitations', ['invitation_token'], unique=True)

    op.create_table('attachments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('entity_type', sa.String(length=20), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_path', sa.String(length=1024), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('file_type', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uploaded_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_path'),
    )
    op.create_index('ix_attachments_id', 'attachments', ['id'], unique=False)
    op.create_index('ix_attachments_tenant_id', 'attachments', ['tenant_id'], unique=False)
    op.create_index('ix_attachments_entity_id', 'attachments', ['entity_id'], unique=False)


def downgrade() -> None:
    """Drop every table."""
    for table in (
        'attachments',
        'user_invitations',
        'project_budgets',
        'customer_invoices',
        'project_costs',
        'employees',
        'change_orders',
        'projects',
        'users',
        'tenants',
    ):
        op.drop_table(table)
