"""create_notifications_table

Revision ID: e2f8a7b1c394
Revises: 6a0e4d8f9b52
Create Date: 2026-10-19 09:25:00.000000
"""
from __future__ import annotations

from alembic import op

revision = "e2f8a7b1c394"
down_revision = "6a0e4d8f9b52"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        "CREATE TYPE notification_type AS ENUM ("
        "'comment', 'ticket_assignment', 'ticket_update', "
        "'project_invitation', 'project_invitation_accepted', 'project_invitation_rejected', "
        "'team_invitation', 'team_invitation_accepted', 'team_invitation_rejected')"
    )

    op.execute("""
        CREATE TABLE notifications (
            id                  UUID        PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id             UUID        NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type                notification_type NOT NULL,
            title               VARCHAR(255) NOT NULL,
            message             TEXT        NOT NULL,
            entity_type         VARCHAR(50),
            entity_id           UUID,
            related_comment_id  UUID        REFERENCES comments(id) ON DELETE SET NULL,
            is_read             BOOLEAN     NOT NULL DEFAULT false,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """)

    op.execute("CREATE INDEX ix_notifications_user_id ON notifications(user_id)")
    op.execute("CREATE INDEX ix_notifications_user_is_read ON notifications(user_id, is_read)")
    op.execute("CREATE INDEX ix_notifications_created_at ON notifications(created_at)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications")
    op.execute("DROP TYPE IF EXISTS notification_type")
