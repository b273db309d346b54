# alembic/versions/001_initial.py

"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

obligation_status = sa.Enum('OUTSTANDING', 'SETTLED', name='obligation_status')


def upgrade():
    op.create_table('obligation',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('label', sa.String(length=255), nullable=False),
        sa.Column('occurred_on', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', obligation_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='ck_obligation_amount_positive')
    )
    op.create_index(
        'ix_obligation_status_date',
        'obligation',
        ['status', 'occurred_on', 'id'],
        unique=False
    )


def downgrade():
    op.drop_index('ix_obligation_status_date', table_name='obligation')
    op.drop_table('obligation')
    obligation_status.drop(op.get_bind(), checkfirst=True)
