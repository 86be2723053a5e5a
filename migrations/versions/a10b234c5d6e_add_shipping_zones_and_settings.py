"""add shipping zones, method instances and settings

Revision ID: a10b234c5d6e
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a10b234c5d6e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username')
    )

    op.create_table('shipping_zones',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('zone_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('shipping_method_instances',
        sa.Column('instance_id', sa.Integer(), nullable=False),
        sa.Column('zone_id', sa.Integer(), nullable=False),
        sa.Column('method_id', sa.String(length=100), nullable=False),
        sa.Column('method_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['zone_id'], ['shipping_zones.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('instance_id')
    )
    op.create_index('ix_shipping_method_instances_zone_id', 'shipping_method_instances', ['zone_id'])
    op.create_index('idx_method_instance', 'shipping_method_instances', ['method_id', 'instance_id'])

    op.create_table('shipping_options',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('option_name', sa.String(length=191), nullable=False),
        sa.Column('option_value', sa.JSON(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shipping_options_option_name', 'shipping_options', ['option_name'], unique=True)

    # Catch-all zone used when no other zone matches
    op.execute("INSERT INTO shipping_zones (id, name, zone_order) VALUES (0, 'Rest of the World', 0)")


def downgrade() -> None:
    op.drop_index('ix_shipping_options_option_name', table_name='shipping_options')
    op.drop_table('shipping_options')
    op.drop_index('idx_method_instance', table_name='shipping_method_instances')
    op.drop_index('ix_shipping_method_instances_zone_id', table_name='shipping_method_instances')
    op.drop_table('shipping_method_instances')
    op.drop_table('shipping_zones')
    op.drop_table('user')
