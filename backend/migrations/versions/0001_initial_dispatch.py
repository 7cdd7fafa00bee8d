"""initial dispatch tables

Revision ID: 0001_initial_dispatch
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_dispatch'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=128), nullable=False),
        sa.Column('full_name', sa.String(length=128)),
        sa.Column('phone', sa.String(length=32)),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table('laundry_hubs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32)),
        sa.Column('operating_hours', sa.String(length=64)),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('services', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_laundry_hubs_name', 'laundry_hubs', ['name'])

    op.create_table('orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=False),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('laundry_hubs.id'), nullable=False),
        sa.Column('driver_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('service_type', sa.String(length=32), nullable=False),
        sa.Column('garment_count', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('pickup_address', sa.String(length=255), nullable=False),
        sa.Column('special_instructions', sa.Text()),
        sa.Column('total_amount', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='pending'),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True)),
        sa.Column('admin_approved_at', sa.DateTime(timezone=True)),
        sa.Column('admin_approved_by', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('garment_count >= 1', name='ck_orders_garment_count_positive')
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_hub_id', 'orders', ['hub_id'])
    op.create_index('ix_orders_driver_id', 'orders', ['driver_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table('order_tracking',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('driver_id', sa.Integer(), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('status_message', sa.String(length=255)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_order_tracking_order_id', 'order_tracking', ['order_id'])

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=64)),
        sa.Column('entity_id', sa.String(length=64)),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])


def downgrade():
    for tbl in ['audit_logs', 'order_tracking', 'orders', 'laundry_hubs', 'profiles']:
        op.drop_table(tbl)
