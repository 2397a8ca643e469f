"""
Email background tasks.

Invitation emails and "invitation accepted" emails to the inviter.
"""

import html
import logging

import resend

from focusforge.core.config import settings
from focusforge.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


def _send(to_email: str, subject: str, body: str) -> dict[str, str]:
    resend.api_key = settings.RESEND_API_KEY
    params: resend.Emails.SendParams = {
        "from": settings.EMAIL_FROM,
        "to": [to_email],
        "subject": subject,
        "html": body,
    }
    response = resend.Emails.send(params)
    return {"status": "sent", "message_id": response["id"]}


@celery_app.task(name="focusforge.workers.email_tasks.send_invitation_email", bind=True, max_retries=3)
def send_invitation_email(
    self,  # type: ignore[no-untyped-def]
    to_email: str,
    invitation_url: str,
    target_name: str,
    inviter_name: str,
    invitee_first_name: str,
) -> dict[str, str]:
    """
    Send an invitation email via Resend.

    Args:
        to_email: Recipient email address.
        invitation_url: Link the invitee follows to accept.
        target_name: Name of the team or project.
        inviter_name: Display name of the person who sent the invite.
        invitee_first_name: Used in the greeting.

    Returns:
        Dict with status and, when sent, message_id.
    """
    if not settings.RESEND_API_KEY:
        logger.info(
            "Email delivery disabled, share invitation for %s manually: %s",
            to_email,
            invitation_url,
        )
        return {"status": "skipped"}

    try:
        return _send(
            to_email,
            subject=f"You've been invited to join {target_name} on Focus Forge",
            body=f"""
                <h2>Hello {html.escape(invitee_first_name)},</h2>
                <p><strong>{html.escape(inviter_name)}</strong> has invited you to join
                <strong>{html.escape(target_name)}</strong>.</p>
                <p>
                    <a href="{html.escape(invitation_url)}"
                       style="background:#6366f1;color:#fff;padding:12px 24px;
                              border-radius:6px;text-decoration:none;display:inline-block;">
                        Accept Invitation
                    </a>
                </p>
                <p>This invitation expires in {settings.INVITATION_EXPIRE_DAYS} days.</p>
                <p>If you did not expect this invitation, you can safely ignore this email.</p>
            """,
        )
    except Exception as exc:
        logger.warning("Invitation email to %s failed: %s", to_email, exc)
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))


@celery_app.task(
    name="focusforge.workers.email_tasks.send_invitation_accepted_email",
    bind=True,
    max_retries=3,
)
def send_invitation_accepted_email(
    self,  # type: ignore[no-untyped-def]
    to_email: str,
    inviter_first_name: str,
    invitee_name: str,
    target_name: str,
) -> dict[str, str]:
    """Tell the inviter that their invitation was accepted."""
    if not settings.RESEND_API_KEY:
        logger.info("Email delivery disabled, skipping acceptance email to %s", to_email)
        return {"status": "skipped"}

    try:
        return _send(
            to_email,
            subject=f"{invitee_name} joined {target_name}",
            body=f"""
                <h2>Hello {html.escape(inviter_first_name)},</h2>
                <p><strong>{html.escape(invitee_name)}</strong> accepted your invitation and is now
                a member of <strong>{html.escape(target_name)}</strong>.</p>
            """,
        )
    except Exception as exc:
        logger.warning("Acceptance email to %s failed: %s", to_email, exc)
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
