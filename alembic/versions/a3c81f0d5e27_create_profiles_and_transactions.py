"""create profiles and transactions

Revision ID: a3c81f0d5e27
Revises: 
Create Date: 2026-10-18 10:21:04.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a3c81f0d5e27'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['id'], ['auth.users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        schema='public',
        if_not_exists=True,
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('user_email', sa.Text(), nullable=False),
        sa.Column('customer_name', sa.Text(), nullable=False),
        sa.Column('phone_number', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('charge', sa.Numeric(precision=10, scale=2), server_default='0', nullable=True),
        sa.Column('include_charge', sa.Boolean(), server_default=sa.text('false'), nullable=True),
        sa.Column('total', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('status', sa.Text(), server_default='Completed', nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        schema='public',
        if_not_exists=True,
    )
    op.create_index('idx_transactions_user_email', 'transactions', ['user_email'], schema='public', if_not_exists=True)
    op.create_index('idx_transactions_date', 'transactions', ['date'], schema='public', if_not_exists=True)
    op.create_index('idx_transactions_type', 'transactions', ['type'], schema='public', if_not_exists=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_transactions_type', table_name='transactions', schema='public')
    op.drop_index('idx_transactions_date', table_name='transactions', schema='public')
    op.drop_index('idx_transactions_user_email', table_name='transactions', schema='public')
    op.drop_table('transactions', schema='public')
    op.drop_table('profiles', schema='public')
