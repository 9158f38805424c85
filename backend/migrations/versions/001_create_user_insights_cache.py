"""Create user_insights_cache table

Revision ID: 001_insights_cache
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_insights_cache'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """One row of narrative insights per user and time range."""
    op.create_table('user_insights_cache',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('time_range', sa.String(length=16), nullable=False),
        sa.Column('insights', sa.JSON(), nullable=False),
        sa.Column('analytics_data', sa.JSON(), nullable=True),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id', 'time_range'),
        sa.CheckConstraint(
            "time_range IN ('week', 'month', 'quarter', 'year')",
            name='ck_user_insights_cache_time_range'
        )
    )

    op.create_index('ix_user_insights_cache_generated_at', 'user_insights_cache', ['generated_at'])


def downgrade():
    """Drop the insights cache table."""
    op.drop_index('ix_user_insights_cache_generated_at', table_name='user_insights_cache')
    op.drop_table('user_insights_cache')
