"""create videos and support_events

Revision ID: 3c1f0a7d52e4
Revises:
Create Date: 2026-10-18 10:12:31.208114

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c1f0a7d52e4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'videos',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('platform', sa.String(), nullable=False),
        sa.Column('platform_video_id', sa.String(), nullable=False),
        sa.Column('title', sa.Text()),
        sa.Column('description', sa.Text()),
        sa.Column('channel_title', sa.Text()),
        sa.Column('url', sa.Text()),
        sa.Column('thumbnail_url', sa.Text()),
        sa.Column('duration_sec', sa.Integer()),
        sa.Column('published_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('views', sa.BIGINT()),
        sa.Column('likes', sa.BIGINT()),
        sa.Column('support_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('platform', 'platform_video_id', name='uq_videos_platform_video'),
    )
    op.create_index('idx_videos_published_at', 'videos', ['published_at'])
    op.create_index('idx_videos_support_points', 'videos', ['support_points'])

    op.create_table(
        'support_events',
        sa.Column('id', sa.BIGINT(), primary_key=True, autoincrement=True),
        sa.Column('video_id', sa.String(), sa.ForeignKey('videos.id'), nullable=False),
        sa.Column('amount', sa.Integer()),
        sa.Column('ip_hash', sa.String()),
        sa.Column('user_agent', sa.String()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_support_events_video_created', 'support_events', ['video_id', 'created_at'])
    op.create_index('idx_support_events_fingerprint', 'support_events',
                    ['ip_hash', 'video_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('idx_support_events_fingerprint', table_name='support_events')
    op.drop_index('idx_support_events_video_created', table_name='support_events')
    op.drop_table('support_events')
    op.drop_index('idx_videos_support_points', table_name='videos')
    op.drop_index('idx_videos_published_at', table_name='videos')
    op.drop_table('videos')
