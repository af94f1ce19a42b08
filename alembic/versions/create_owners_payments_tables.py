"""create owners and payments tables

Revision ID: 3c1f7a9d2b40
Revises:
Create Date: 2026-10-19 10:12:41

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f7a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'owners',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('box_id', sa.Integer(), server_default='0', nullable=False),
        sa.Column('phone', sa.String(length=16), nullable=True),
        sa.Column('place', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='owners_name_key'),
    )

    # box_id 0 은 "미지정" 이므로 0이 아닌 값만 unique
    op.create_index(
        'uq_owners_box_id_set',
        'owners',
        ['box_id'],
        unique=True,
        postgresql_where=sa.text('box_id <> 0'),
        sqlite_where=sa.text('box_id <> 0'),
    )
    op.create_index('ix_owners_place', 'owners', ['place'])

    # owner_id 는 FK 없이 저장 (owner 삭제 시 납부 기록 유지)
    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('pay_for', sa.Date(), nullable=False),
        sa.Column('pay_date', sa.Date(), nullable=False),
        sa.Column('paid', sa.Float(), nullable=False),
        sa.Column('balance', sa.Float(), server_default='0', nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'year', 'month', name='uq_payments_owner_period'),
    )

    op.create_index('ix_payments_owner_id_pay_for', 'payments', ['owner_id', 'pay_for'])


def downgrade() -> None:
    op.drop_index('ix_payments_owner_id_pay_for', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_owners_place', table_name='owners')
    op.drop_index('uq_owners_box_id_set', table_name='owners')
    op.drop_table('owners')
