"""
SQLAlchemy ORM models.

All models imported here to ensure they are registered with Base.metadata.
Import order matters: base models before dependent models.
"""

from focusforge.models.base import Base, TimestampMixin, UUIDMixin
from focusforge.models.user import User
from focusforge.models.team import Team, TeamMember, TeamRole
from focusforge.models.project import Project, ProjectMember, ProjectRole, ProjectStatus, ProjectType
from focusforge.models.ticket import Ticket, TicketPriority, TicketStatus, ticket_assignees
from focusforge.models.comment import Comment
from focusforge.models.invitation import InvitationStatus, ProjectInvitation, TeamInvitation
from focusforge.models.notification import Notification, NotificationType

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "User",
    "Team",
    "TeamMember",
    "TeamRole",
    "Project",
    "ProjectMember",
    "ProjectRole",
    "ProjectStatus",
    "ProjectType",
    "Ticket",
    "TicketPriority",
    "TicketStatus",
    "ticket_assignees",
    "Comment",
    "InvitationStatus",
    "ProjectInvitation",
    "TeamInvitation",
    "Notification",
    "NotificationType",
]
