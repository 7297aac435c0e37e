"""create game_session, player and found_word tables

Revision ID: 4c2a9e7d1b30
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e7d1b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game_session' not in existing_tables:
        op.create_table(
            'game_session',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_code', sa.String(length=8), nullable=False),
            sa.Column('grid_data', sa.Text(), nullable=False),
            sa.Column('words_data', sa.Text(), nullable=False),
            sa.Column('difficulty', sa.String(length=16), nullable=False),
            sa.Column('duration', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False),
            sa.Column('max_players', sa.Integer(), nullable=False),
            sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
            sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_game_session_session_code', 'game_session', ['session_code'], unique=True)

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('color', sa.String(length=20), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_player_session_id', 'player', ['session_id'], unique=False)

    if 'found_word' not in existing_tables:
        op.create_table(
            'found_word',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.Integer(), nullable=False),
            sa.Column('player_id', sa.Integer(), nullable=False),
            sa.Column('word', sa.String(length=50), nullable=False),
            sa.Column('start_row', sa.Integer(), nullable=False),
            sa.Column('start_col', sa.Integer(), nullable=False),
            sa.Column('end_row', sa.Integer(), nullable=False),
            sa.Column('end_col', sa.Integer(), nullable=False),
            sa.Column('found_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['game_session.id']),
            sa.ForeignKeyConstraint(['player_id'], ['player.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('session_id', 'word', name='uq_found_word_session_word'),
        )
        op.create_index('ix_found_word_session_id', 'found_word', ['session_id'], unique=False)


def downgrade():
    op.drop_index('ix_found_word_session_id', table_name='found_word')
    op.drop_table('found_word')
    op.drop_index('ix_player_session_id', table_name='player')
    op.drop_table('player')
    op.drop_index('ix_game_session_session_code', table_name='game_session')
    op.drop_table('game_session')
