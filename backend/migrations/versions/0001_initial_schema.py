"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

This migration creates the complete dealership schema:
- trucks, truck_images, truck_features: inventory and its ordered child rows
- truck_views: append-only public view events (hashed IPs only)
- inquiries, financing_applications: customer leads (truck reference is SET NULL)
- users, session_tokens: admin accounts and hashed session tokens
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # trucks
    # ==========================================================================
    op.create_table('trucks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('make', sa.String(length=64), nullable=False),
        sa.Column('model', sa.String(length=64), nullable=False),
        sa.Column('trim', sa.String(length=64), nullable=False),
        sa.Column('mileage', sa.Integer(), nullable=False),
        sa.Column('fuel_type', sa.String(length=32), nullable=False),
        sa.Column('transmission', sa.String(length=32), nullable=False),
        sa.Column('drivetrain', sa.String(length=32), nullable=False),
        sa.Column('color', sa.String(length=64), nullable=False),
        sa.Column('vin', sa.String(length=32), nullable=False),
        sa.Column('stock_number', sa.String(length=32), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('listing_type', sa.String(length=16), nullable=False, server_default='SALE'),
        sa.Column('price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('monthly_price_cents', sa.Integer(), nullable=True),
        sa.Column('lease_term_months', sa.Integer(), nullable=True),
        sa.Column('down_payment_cents', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='AVAILABLE'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('vin'),
        sa.UniqueConstraint('stock_number'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('trucks', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_trucks_model'), ['model'], unique=False)
        batch_op.create_index(batch_op.f('ix_trucks_status'), ['status'], unique=False)
        batch_op.create_index('ix_trucks_status_featured', ['status', 'featured'], unique=False)
        batch_op.create_index('ix_trucks_created_at', ['created_at'], unique=False)

    op.create_table('truck_images',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('truck_id', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=1024), nullable=False),
        sa.Column('alt_text', sa.String(length=255), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['truck_id'], ['trucks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('truck_images', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_truck_images_truck_id'), ['truck_id'], unique=False)
        batch_op.create_index('ix_truck_images_truck_sort', ['truck_id', 'sort_order'], unique=False)

    op.create_table('truck_features',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('truck_id', sa.Integer(), nullable=False),
        sa.Column('feature_name', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(['truck_id'], ['trucks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('truck_features', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_truck_features_truck_id'), ['truck_id'], unique=False)

    # ==========================================================================
    # truck_views
    # ==========================================================================
    op.create_table('truck_views',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('truck_id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('ip_hash', sa.String(length=64), nullable=True),
        sa.Column('session_id', sa.String(length=128), nullable=True),
        sa.ForeignKeyConstraint(['truck_id'], ['trucks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('truck_views', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_truck_views_truck_id'), ['truck_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_truck_views_timestamp'), ['timestamp'], unique=False)
        batch_op.create_index(batch_op.f('ix_truck_views_ip_hash'), ['ip_hash'], unique=False)
        batch_op.create_index(batch_op.f('ix_truck_views_session_id'), ['session_id'], unique=False)
        batch_op.create_index('ix_truck_views_truck_timestamp', ['truck_id', 'timestamp'], unique=False)

    # ==========================================================================
    # leads
    # ==========================================================================
    op.create_table('inquiries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('truck_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('inquiry_type', sa.String(length=16), nullable=False, server_default='GENERAL'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='NEW'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['truck_id'], ['trucks.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('inquiries', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_inquiries_truck_id'), ['truck_id'], unique=False)
        batch_op.create_index('ix_inquiries_status_created', ['status', 'created_at'], unique=False)

    op.create_table('financing_applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('truck_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('annual_income_cents', sa.Integer(), nullable=True),
        sa.Column('down_payment_cents', sa.Integer(), nullable=True),
        sa.Column('financing_type', sa.String(length=32), nullable=True),
        sa.Column('truck_interest', sa.String(length=64), nullable=True),
        sa.Column('additional_info', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='PENDING'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['truck_id'], ['trucks.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('financing_applications', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_financing_applications_truck_id'), ['truck_id'], unique=False)
        batch_op.create_index('ix_financing_status_created', ['status', 'created_at'], unique=False)

    # ==========================================================================
    # admin accounts
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='ADMIN'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_username'), ['username'], unique=True)

    op.create_table('session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('session_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_session_tokens_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_token_hash'), ['token_hash'], unique=True)
        batch_op.create_index(batch_op.f('ix_session_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_is_revoked'), ['is_revoked'], unique=False)
        batch_op.create_index('ix_session_tokens_user_active', ['user_id', 'is_revoked'], unique=False)


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_table('session_tokens')
    op.drop_table('users')
    op.drop_table('financing_applications')
    op.drop_table('inquiries')
    op.drop_table('truck_views')
    op.drop_table('truck_features')
    op.drop_table('truck_images')
    op.drop_table('trucks')
