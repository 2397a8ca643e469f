"""create_invitations_tables

Revision ID: 6a0e4d8f9b52
Revises: 1d9b6c3e5f27
Create Date: 2026-10-19 09:20:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision: str = '6a0e4d8f9b52'
down_revision: Union[str, None] = '1d9b6c3e5f27'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

invitation_role = sa.Enum('admin', 'member', name='invitation_role')
invitation_status = sa.Enum('pending', 'accepted', 'rejected', 'expired', name='invitation_status')


def _invitation_columns() -> list[sa.Column]:
    return [
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', invitation_role, nullable=False, server_default='member'),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('status', invitation_status, nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('invited_user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('invited_by_user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create team_invitations and project_invitations tables."""
    op.create_table(
        'team_invitations',
        *_invitation_columns(),
        sa.Column('team_id', UUID(as_uuid=True), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
    )
    op.create_index('ix_team_invitations_token', 'team_invitations', ['token'], unique=True)
    op.create_index('ix_team_invitations_team_id', 'team_invitations', ['team_id'])
    op.create_index('ix_team_invitations_email', 'team_invitations', ['email'])
    op.create_index('ix_team_invitations_expires_at', 'team_invitations', ['expires_at'])
    op.create_index('ix_team_invitations_invited_user_id', 'team_invitations', ['invited_user_id'])
    op.create_index('ix_team_invitations_team_status', 'team_invitations', ['team_id', 'status'])
    op.create_index('ix_team_invitations_email_status', 'team_invitations', ['email', 'status'])

    op.create_table(
        'project_invitations',
        *_invitation_columns(),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_project_invitations_token', 'project_invitations', ['token'], unique=True)
    op.create_index('ix_project_invitations_project_id', 'project_invitations', ['project_id'])
    op.create_index('ix_project_invitations_email', 'project_invitations', ['email'])
    op.create_index('ix_project_invitations_expires_at', 'project_invitations', ['expires_at'])
    op.create_index('ix_project_invitations_invited_user_id', 'project_invitations', ['invited_user_id'])
    op.create_index('ix_project_invitations_project_status', 'project_invitations', ['project_id', 'status'])
    op.create_index('ix_project_invitations_email_status', 'project_invitations', ['email', 'status'])


def downgrade() -> None:
    """Drop invitation tables."""
    op.drop_table('project_invitations')
    op.drop_table('team_invitations')
    bind = op.get_bind()
    invitation_status.drop(bind, checkfirst=True)
    invitation_role.drop(bind, checkfirst=True)
