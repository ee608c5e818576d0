"""create accounts, categories, tags, expenses, income and transfers tables

Revision ID: 3f9c2a7d1b40
Revises: 
Create Date: 2026-10-18 10:12:44.517203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money_columns():
    return [
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('timestamp', sa.DateTime, nullable=False),
        sa.Column('comment', sa.Text, nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.UniqueConstraint('name', name='uq_account_name'),
    )
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.UniqueConstraint('name', name='uq_category_name'),
    )
    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.UniqueConstraint('name', name='uq_tag_name'),
    )
    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('category_id', sa.Uuid, sa.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=False),
        *_money_columns(),
    )
    op.create_index('idx_expenses_account', 'expenses', ['account_id'])
    op.create_index('idx_expenses_category', 'expenses', ['category_id'])
    op.create_index('idx_expenses_timestamp', 'expenses', ['timestamp'])

    op.create_table(
        'expense_tags',
        sa.Column('expense_id', sa.Uuid, sa.ForeignKey('expenses.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Uuid, sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'income',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('category_id', sa.Uuid, sa.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=False),
        *_money_columns(),
    )
    op.create_index('idx_income_account', 'income', ['account_id'])
    op.create_index('idx_income_category', 'income', ['category_id'])
    op.create_index('idx_income_timestamp', 'income', ['timestamp'])

    op.create_table(
        'transfers',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('outgoing_account_id', sa.Uuid, sa.ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('incoming_account_id', sa.Uuid, sa.ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=False),
        *_money_columns(),
    )
    op.create_index('idx_transfers_outgoing_account', 'transfers', ['outgoing_account_id'])
    op.create_index('idx_transfers_incoming_account', 'transfers', ['incoming_account_id'])
    op.create_index('idx_transfers_timestamp', 'transfers', ['timestamp'])


def downgrade() -> None:
    op.drop_table('transfers')
    op.drop_table('income')
    op.drop_table('expense_tags')
    op.drop_table('expenses')
    op.drop_table('tags')
    op.drop_table('categories')
    op.drop_table('accounts')
