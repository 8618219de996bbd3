"""initial_core_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = 'core'


def _timestamps():
    return (
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def upgrade() -> None:
    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")

    op.create_table(
        'equipment_type',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False, unique=True),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.equipment_type.id'), nullable=False),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.equipment.id'), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('metadata', postgresql.JSONB(), nullable=False),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_index('ix_core_equipment_name', 'equipment', ['name'], schema=SCHEMA)
    op.create_index('ix_core_equipment_type_id', 'equipment', ['type_id'], schema=SCHEMA)
    op.create_index('ix_core_equipment_parent_id', 'equipment', ['parent_id'], schema=SCHEMA)

    op.create_table(
        'mode_group',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False, unique=True),
        sa.Column('description', sa.String(length=2048), nullable=False),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_table(
        'mode',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mode_group_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.mode_group.id'), nullable=False),
        sa.Column('description', sa.String(length=2048), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('mode_group_id', 'description', name='uq_mode_group_description'),
        schema=SCHEMA,
    )
    op.create_index('ix_core_mode_mode_group_id', 'mode', ['mode_group_id'], schema=SCHEMA)

    op.create_table(
        'state_group',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False, unique=True),
        sa.Column('description', sa.String(length=2048), nullable=False),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_table(
        'state',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('state_group_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.state_group.id'), nullable=False),
        sa.Column('code', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=2048), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('state_group_id', 'code', name='uq_state_group_code'),
        sa.UniqueConstraint('state_group_id', 'description', name='uq_state_group_description'),
        schema=SCHEMA,
    )
    op.create_index('ix_core_state_state_group_id', 'state', ['state_group_id'], schema=SCHEMA)

    op.create_table(
        'equipment_mode_group',
        sa.Column('equipment_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.equipment.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('mode_group_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.mode_group.id'), primary_key=True),
        schema=SCHEMA,
    )
    op.create_table(
        'equipment_state_group',
        sa.Column('equipment_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.equipment.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('state_group_id', sa.Integer(), sa.ForeignKey(f'{SCHEMA}.state_group.id'), primary_key=True),
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_table('equipment_state_group', schema=SCHEMA)
    op.drop_table('equipment_mode_group', schema=SCHEMA)
    op.drop_index('ix_core_state_state_group_id', table_name='state', schema=SCHEMA)
    op.drop_table('state', schema=SCHEMA)
    op.drop_table('state_group', schema=SCHEMA)
    op.drop_index('ix_core_mode_mode_group_id', table_name='mode', schema=SCHEMA)
    op.drop_table('mode', schema=SCHEMA)
    op.drop_table('mode_group', schema=SCHEMA)
    op.drop_index('ix_core_equipment_parent_id', table_name='equipment', schema=SCHEMA)
    op.drop_index('ix_core_equipment_type_id', table_name='equipment', schema=SCHEMA)
    op.drop_index('ix_core_equipment_name', table_name='equipment', schema=SCHEMA)
    op.drop_table('equipment', schema=SCHEMA)
    op.drop_table('equipment_type', schema=SCHEMA)
