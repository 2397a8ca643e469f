"""create_tickets_and_comments_tables

Revision ID: 1d9b6c3e5f27
Revises: c5e7f2a9d418
Create Date: 2026-10-19 09:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision: str = '1d9b6c3e5f27'
down_revision: Union[str, None] = 'c5e7f2a9d418'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ticket_status = sa.Enum('todo', 'in_progress', 'review', 'done', name='ticket_status')
ticket_priority = sa.Enum('low', 'medium', 'high', 'urgent', name='ticket_priority')


def upgrade() -> None:
    """Create tickets, ticket_assignees and comments tables."""
    op.create_table(
        'tickets',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', ticket_status, nullable=False, server_default='todo'),
        sa.Column('priority', ticket_priority, nullable=False, server_default='medium'),
        sa.Column('type', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('team_id', UUID(as_uuid=True), sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('creator_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_tickets_project_id', 'tickets', ['project_id'])
    op.create_index('ix_tickets_creator_id', 'tickets', ['creator_id'])
    op.create_index('ix_tickets_project_created', 'tickets', ['project_id', 'created_at'])

    op.create_table(
        'ticket_assignees',
        sa.Column('ticket_id', UUID(as_uuid=True), sa.ForeignKey('tickets.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'comments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('ticket_id', UUID(as_uuid=True), sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_comments_ticket_id', 'comments', ['ticket_id'])
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])


def downgrade() -> None:
    """Drop tickets, ticket_assignees and comments tables."""
    op.drop_index('ix_comments_author_id', table_name='comments')
    op.drop_index('ix_comments_ticket_id', table_name='comments')
    op.drop_table('comments')
    op.drop_table('ticket_assignees')
    op.drop_index('ix_tickets_project_created', table_name='tickets')
    op.drop_index('ix_tickets_creator_id', table_name='tickets')
    op.drop_index('ix_tickets_project_id', table_name='tickets')
    op.drop_table('tickets')
    bind = op.get_bind()
    ticket_priority.drop(bind, checkfirst=True)
    ticket_status.drop(bind, checkfirst=True)
