"""Initial migration

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
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('role', sa.Enum('ADMIN', 'WAITER', 'CHEF', name='userrole'), nullable=False),
        sa.Column('permissions', sa.JSON()),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('is_online', sa.Boolean(), default=False),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create restaurant_settings table (single branding row)
    op.create_table(
        'restaurant_settings',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('restaurant_name', sa.String(100)),
        sa.Column('logo', sa.String(500)),
        sa.Column('primary_color', sa.String(7)),
        sa.Column('secondary_color', sa.String(7)),
        sa.Column('accent_color', sa.String(7)),
        sa.Column('customer_menu_base_url', sa.String(500)),
        sa.Column('menu_categories', sa.JSON()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create menu_items table
    op.create_table(
        'menu_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('image_url', sa.String(500)),
        sa.Column('is_popular', sa.Boolean(), default=False),
        sa.Column('popular_rank', sa.Integer()),
        sa.Column('display_order', sa.Integer()),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('allergens', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create customizations table
    op.create_table(
        'customizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('menu_item_id', sa.Uuid(), sa.ForeignKey('menu_items.id'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('allow_multiple', sa.Boolean(), default=False),
        sa.Column('required', sa.Boolean(), default=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create tables table
    op.create_table(
        'tables',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(50), unique=True, nullable=False),
        sa.Column('qr_code_url', sa.String(1000), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('occupied_since', sa.DateTime()),
        sa.Column('current_occupants', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('email_consent', sa.Boolean(), default=False),
        sa.Column('visit_count', sa.Integer(), nullable=False),
        sa.Column('total_spent_cents', sa.Integer(), nullable=False),
        sa.Column('last_visit_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('table_id', sa.Uuid(), sa.ForeignKey('tables.id'), nullable=False),
        sa.Column('table_name', sa.String(50), nullable=False),
        sa.Column('customer_name', sa.String(100), nullable=False),
        sa.Column('customer_email', sa.String(255)),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id')),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('queue_position', sa.Integer()),
        sa.Column('order_source', sa.String(20), nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('claimed_by', sa.Uuid(), sa.ForeignKey('users.id')),
        sa.Column('claimed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('confirmed_at', sa.DateTime()),
        sa.Column('ready_at', sa.DateTime()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create order_items table
    op.create_table(
        'order_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('order_id', sa.Uuid(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('menu_item_id', sa.Uuid(), sa.ForeignKey('menu_items.id'), nullable=False),
        sa.Column('menu_item_name', sa.String(100), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('base_price_cents', sa.Integer(), nullable=False),
        sa.Column('customizations', sa.JSON(), nullable=False),
        sa.Column('customer_notes', sa.Text()),
        sa.Column('item_total_cents', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create call_requests table
    op.create_table(
        'call_requests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('table_id', sa.Uuid(), sa.ForeignKey('tables.id'), nullable=False),
        sa.Column('table_name', sa.String(50), nullable=False),
        sa.Column('customer_name', sa.String(100), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('claimed_by', sa.Uuid(), sa.ForeignKey('users.id')),
        sa.Column('claimed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('completed_by', sa.Uuid(), sa.ForeignKey('users.id')),
    )

    # Create indexes
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_table_id', 'orders', ['table_id'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_call_requests_status', 'call_requests', ['status'])
    op.create_index(
        'uq_call_requests_pending_table_type',
        'call_requests',
        ['table_id', 'type'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )


def downgrade() -> None:
    op.drop_table('call_requests')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('customers')
    op.drop_table('tables')
    op.drop_table('customizations')
    op.drop_table('menu_items')
    op.drop_table('restaurant_settings')
    op.drop_table('users')
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
