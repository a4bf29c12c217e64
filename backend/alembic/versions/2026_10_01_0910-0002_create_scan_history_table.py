"""create scan_history table

Revision ID: 0002_create_scan_history_table
Revises: 0001_create_users_table
Create Date: 2026-10-01 09:10:00.000000+00:00

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0002_create_scan_history_table'
down_revision: Union[str, None] = '0001_create_users_table'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'scan_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('item_category', sa.String(length=100), nullable=True),
        sa.Column('item_brand', sa.String(length=100), nullable=True),
        sa.Column('item_description', sa.Text(), nullable=True),
        sa.Column('condition_assessment', sa.Text(), nullable=True),
        sa.Column('price_range', sa.String(length=50), nullable=True),
        sa.Column('platform_prices', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('confidence_score', sa.Integer(), nullable=True),
        sa.Column('ai_response', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('scanned_at', sa.DateTime(), server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text("(now() at time zone 'utc')"), nullable=False),
        sa.CheckConstraint(
            'confidence_score >= 0 AND confidence_score <= 100',
            name='ck_scan_history_confidence_score',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_scan_history_user_id', 'scan_history', ['user_id'], unique=False)
    op.create_index('ix_scan_history_item_category', 'scan_history', ['item_category'], unique=False)
    op.create_index('ix_scan_history_item_brand', 'scan_history', ['item_brand'], unique=False)
    op.create_index('ix_scan_history_is_favorite', 'scan_history', ['is_favorite'], unique=False)
    op.create_index('ix_scan_history_scanned_at', 'scan_history', ['scanned_at'], unique=False)
    op.create_index('ix_scan_history_user_id_scanned_at', 'scan_history', ['user_id', 'scanned_at'], unique=False)
    op.create_index('ix_scan_history_user_id_is_favorite', 'scan_history', ['user_id', 'is_favorite'], unique=False)
    op.create_index('ix_scan_history_user_id_item_category', 'scan_history', ['user_id', 'item_category'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_scan_history_user_id_item_category', table_name='scan_history')
    op.drop_index('ix_scan_history_user_id_is_favorite', table_name='scan_history')
    op.drop_index('ix_scan_history_user_id_scanned_at', table_name='scan_history')
    op.drop_index('ix_scan_history_scanned_at', table_name='scan_history')
    op.drop_index('ix_scan_history_is_favorite', table_name='scan_history')
    op.drop_index('ix_scan_history_item_brand', table_name='scan_history')
    op.drop_index('ix_scan_history_item_category', table_name='scan_history')
    op.drop_index('ix_scan_history_user_id', table_name='scan_history')
    op.drop_table('scan_history')
