"""Create transactions table

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'transactions',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('country', sa.String(64), nullable=False),
        sa.Column('region', sa.String(64), nullable=False),
        sa.Column('product', sa.String(128), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('transaction_date', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount >= 0', name='ck_transactions_amount_non_negative'),
        sa.CheckConstraint('quantity >= 0', name='ck_transactions_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transactions_country'), 'transactions', ['country'], unique=False)
    op.create_index(op.f('ix_transactions_region'), 'transactions', ['region'], unique=False)
    op.create_index(op.f('ix_transactions_product'), 'transactions', ['product'], unique=False)
    op.create_index(op.f('ix_transactions_transaction_date'), 'transactions', ['transaction_date'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_transactions_transaction_date'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_product'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_region'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_country'), table_name='transactions')
    op.drop_table('transactions')
