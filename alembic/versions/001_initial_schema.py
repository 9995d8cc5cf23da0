"""Initial schema - filters, bookings, accessories

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates:
- filters (fixed fleet of four)
- accessories and accessory_out_of_service windows
- bookings (one row per filter day) and booking_accessories
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'filters',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('location', sa.String(255), nullable=False, server_default='Storage'),
        sa.Column('uv_capability', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('ten_micron_capability', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('service_frequency_days', sa.Integer(), nullable=False, server_default='90'),
        sa.Column('last_service_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
    )

    op.create_table(
        'accessories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('pool', sa.String(20), nullable=False, server_default='pool_a'),
        sa.Column('total_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_critical', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('required_per_booking', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
    )
    op.create_index('ix_accessory_pool', 'accessories', ['pool'])

    op.create_table(
        'accessory_out_of_service',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('accessory_id', sa.Integer(), sa.ForeignKey('accessories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('reason', sa.String(255), nullable=False, server_default=''),
    )
    op.create_index(
        'ix_out_of_service_accessory_dates',
        'accessory_out_of_service',
        ['accessory_id', 'start_date', 'end_date']
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('filter_id', sa.Integer(), sa.ForeignKey('filters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='booking'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.UniqueConstraint('filter_id', 'date', name='uq_booking_filter_date'),
    )
    op.create_index('ix_booking_date', 'bookings', ['date'])

    # accessory_id has no foreign key so history survives accessory deletion
    op.create_table(
        'booking_accessories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('booking_id', sa.String(36), sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('accessory_id', sa.Integer(), nullable=False),
        sa.Column('accessory_name', sa.String(150), nullable=False),
        sa.Column('unit', sa.String(50), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
    )
    op.create_index('ix_booking_accessory_accessory', 'booking_accessories', ['accessory_id'])


def downgrade() -> None:
    op.drop_index('ix_booking_accessory_accessory', 'booking_accessories')
    op.drop_table('booking_accessories')

    op.drop_index('ix_booking_date', 'bookings')
    op.drop_table('bookings')

    op.drop_index('ix_out_of_service_accessory_dates', 'accessory_out_of_service')
    op.drop_table('accessory_out_of_service')

    op.drop_index('ix_accessory_pool', 'accessories')
    op.drop_table('accessories')

    op.drop_table('filters')
