"""Initial board schema: day_records, weather, unlock_sessions

Revision ID: 3f9a1c2d7e40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('day_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('board_type', sa.Text(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('tech_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('actual_jobs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('aged_opps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_goal', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('variance', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('aged_percent', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('board_type', 'date', name='uq_day_record_board_type_date'),
    )
    op.create_index('ix_day_records_date', 'day_records', ['date'])

    op.create_table('weather',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('temp_low', sa.Float(), nullable=False),
        sa.Column('temp_high', sa.Float(), nullable=False),
        sa.Column('raw', sa.JSON(), nullable=False),
        sa.Column('fetched_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date'),
    )
    op.create_index('ix_weather_fetched_at', 'weather', ['fetched_at'])

    op.create_table('unlock_sessions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('unlocked_by', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_unlock_sessions_expires_at', 'unlock_sessions', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_unlock_sessions_expires_at', table_name='unlock_sessions')
    op.drop_table('unlock_sessions')
    op.drop_index('ix_weather_fetched_at', table_name='weather')
    op.drop_table('weather')
    op.drop_index('ix_day_records_date', table_name='day_records')
    op.drop_table('day_records')
