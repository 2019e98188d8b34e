"""Create projects, project members and events

Revision ID: 3f1c9e2a7b44
Revises:
Create Date: 2026-10-18 11:40:12.504217

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9e2a7b44'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('api_key', sa.String(255), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'])

    op.create_table(
        'project_members',
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid(), primary_key=True),
    )
    op.create_index('ix_project_members_user_id', 'project_members', ['user_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_name', sa.String(255), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('properties', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_events_event_name', 'events', ['event_name'])
    # Window queries: project set + created_at lower bound
    op.create_index('idx_project_created', 'events', ['project_id', 'created_at'])


def downgrade():
    op.drop_index('idx_project_created', 'events')
    op.drop_index('ix_events_event_name', 'events')
    op.drop_table('events')
    op.drop_index('ix_project_members_user_id', 'project_members')
    op.drop_table('project_members')
    op.drop_index('ix_projects_owner_id', 'projects')
    op.drop_table('projects')
