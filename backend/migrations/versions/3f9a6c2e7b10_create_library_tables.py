"""create_library_tables

Revision ID: 3f9a6c2e7b10
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3f9a6c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(sa.inspect(bind).get_table_names())

    # init_db() may already have created the tables on a fresh install
    if 'songs' not in existing:
        op.create_table(
            'songs',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('artist', sa.String(), nullable=False),
            sa.Column('album', sa.String(), nullable=False),
            sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('file_path', sa.String(), nullable=False),
            sa.Column('album_cover', sa.String(), nullable=True),
            sa.Column('release_date', sa.String(), nullable=True),
            sa.Column('album_description', sa.Text(), nullable=True),
            sa.Column('lyrics', sa.Text(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_songs_created_at', 'songs', ['created_at'])

    if 'playlists' not in existing:
        op.create_table(
            'playlists',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.String(), nullable=True),
            sa.Column('cover_image', sa.String(), nullable=True),
            sa.Column('song_ids', sa.JSON(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_playlists_created_at', 'playlists', ['created_at'])

    if 'albums' not in existing:
        op.create_table(
            'albums',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('artist', sa.String(), nullable=False),
            sa.Column('cover_image', sa.String(), nullable=True),
            sa.Column('release_date', sa.String(), nullable=True),
            sa.Column('description', sa.String(), nullable=True),
            sa.Column('song_ids', sa.JSON(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_albums_created_at', 'albums', ['created_at'])

    if 'users' not in existing:
        op.create_table(
            'users',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('username', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('favorite_song_ids', sa.JSON(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)
        op.create_index('ix_users_email', 'users', ['email'], unique=True)


def downgrade() -> None:
    op.drop_table('users')
    op.drop_table('albums')
    op.drop_table('playlists')
    op.drop_table('songs')
