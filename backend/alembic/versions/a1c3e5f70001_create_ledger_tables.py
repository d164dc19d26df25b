"""create_ledger_tables

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

account_type = sa.Enum('ASSET', 'LIABILITY', 'EQUITY', 'REVENUE', 'EXPENSE', name='accounttype')
account_status = sa.Enum('ACTIVE', 'INACTIVE', name='accountstatus')
journal_type = sa.Enum('GENERAL', 'SALES', 'PURCHASE', 'EXPENSE', 'ADJUSTMENT', 'PAYMENT', name='journaltype')
journal_status = sa.Enum('DRAFT', 'POSTED', name='journalstatus')
sale_status = sa.Enum('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED', name='salestatus')


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('account_type', account_type, nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('opening_balance', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('balance', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('status', account_status, nullable=False, server_default='ACTIVE'),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'code', name='_tenant_account_code_uc'),
    )
    op.create_index('ix_accounts_id', 'accounts', ['id'])
    op.create_index('ix_accounts_tenant_id', 'accounts', ['tenant_id'])
    op.create_index('ix_accounts_code', 'accounts', ['code'])

    op.create_table(
        'journals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('journal_no', sa.String(length=30), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reference', sa.String(length=255), nullable=True),
        sa.Column('journal_type', journal_type, nullable=False),
        sa.Column('total_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('status', journal_status, nullable=False, server_default='DRAFT'),
        sa.Column('version_id', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'journal_no', name='_tenant_journal_no_uc'),
    )
    op.create_index('ix_journals_id', 'journals', ['id'])
    op.create_index('ix_journals_tenant_id', 'journals', ['tenant_id'])
    op.create_index('ix_journals_journal_no', 'journals', ['journal_no'])
    op.create_index('ix_journals_date', 'journals', ['date'])

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('journal_id', sa.Integer(), sa.ForeignKey('journals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('debit_account_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=True),
        sa.Column('credit_account_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('debit_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('credit_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        *_audit_columns(),
        sa.CheckConstraint('debit_amount >= 0'),
        sa.CheckConstraint('credit_amount >= 0'),
        sa.CheckConstraint('debit_account_id IS NOT NULL OR credit_account_id IS NOT NULL', name='check_entry_has_account'),
    )
    op.create_index('ix_journal_entries_id', 'journal_entries', ['id'])
    op.create_index('ix_journal_entries_journal_id', 'journal_entries', ['journal_id'])
    op.create_index('ix_journal_entries_debit_account_id', 'journal_entries', ['debit_account_id'])
    op.create_index('ix_journal_entries_credit_account_id', 'journal_entries', ['credit_account_id'])

    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('sale_no', sa.String(length=30), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(length=100), nullable=True),
        sa.Column('subtotal', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('tax', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('total', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('status', sale_status, nullable=False, server_default='PENDING'),
        sa.Column('journal_id', sa.Integer(), sa.ForeignKey('journals.id'), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint('tenant_id', 'sale_no', name='_tenant_sale_no_uc'),
        sa.UniqueConstraint('journal_id', name='_sale_journal_uc'),
    )
    op.create_index('ix_sales_id', 'sales', ['id'])
    op.create_index('ix_sales_tenant_id', 'sales', ['tenant_id'])
    op.create_index('ix_sales_sale_no', 'sales', ['sale_no'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('sales')
    op.drop_table('journal_entries')
    op.drop_table('journals')
    op.drop_table('accounts')
    for enum_type in (sale_status, journal_status, journal_type, account_status, account_type):
        enum_type.drop(op.get_bind(), checkfirst=True)
