"""
Background task tests.

Tasks are run eagerly; Resend is replaced with a recording stub via monkeypatch.
"""

import resend

from focusforge.core.config import settings
from focusforge.workers import email_tasks
from focusforge.workers.celery_app import celery_app
from helpers import auth, create_team, signup_user, unique_email


def test_invitation_email_skipped_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "")

    result = email_tasks.send_invitation_email.apply(kwargs={
        "to_email": "someone@example.com",
        "invitation_url": "http://localhost/accept-invitation/abc",
        "target_name": "Platform",
        "inviter_name": "Olive",
        "invitee_first_name": "Sam",
    })
    assert result.get() == {"status": "skipped"}


def test_invitation_email_sent_with_api_key(monkeypatch):
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": "msg_123"}

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(resend.Emails, "send", fake_send)

    result = email_tasks.send_invitation_email.apply(kwargs={
        "to_email": "someone@example.com",
        "invitation_url": "http://localhost/accept-invitation/abc",
        "target_name": "Platform",
        "inviter_name": "Olive",
        "invitee_first_name": "Sam",
    })
    assert result.get() == {"status": "sent", "message_id": "msg_123"}
    assert sent[0]["to"] == ["someone@example.com"]
    assert "Platform" in sent[0]["subject"]
    assert "http://localhost/accept-invitation/abc" in sent[0]["html"]


def test_accepted_email_sent(monkeypatch):
    sent = []
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(resend.Emails, "send", lambda params: sent.append(params) or {"id": "m"})

    result = email_tasks.send_invitation_accepted_email.apply(kwargs={
        "to_email": "owner@example.com",
        "inviter_first_name": "Olive",
        "invitee_name": "Sam Lee",
        "target_name": "Platform",
    })
    assert result.get()["status"] == "sent"
    assert sent[0]["subject"] == "Sam Lee joined Platform"


def test_invitation_email_escapes_user_values(monkeypatch):
    sent = []
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(resend.Emails, "send", lambda params: sent.append(params) or {"id": "m"})

    email_tasks.send_invitation_email.apply(kwargs={
        "to_email": "someone@example.com",
        "invitation_url": "http://localhost/accept-invitation/abc",
        "target_name": "<b>Ops</b>",
        "inviter_name": "Olive & Co",
        "invitee_first_name": "<script>x</script>",
    })
    body = sent[0]["html"]
    assert "<script>" not in body
    assert "&lt;script&gt;x&lt;/script&gt;" in body
    assert "&lt;b&gt;Ops&lt;/b&gt;" in body
    assert "Olive &amp; Co" in body


async def test_invite_still_created_when_email_cannot_be_queued(client, monkeypatch):
    def broken_delay(*args, **kwargs):
        raise ConnectionError("broker unavailable")

    monkeypatch.setattr(email_tasks.send_invitation_email, "delay", broken_delay)

    owner_token, _ = await signup_user(client, "queuefail")
    team = await create_team(client, owner_token)

    resp = await client.post(
        f"/api/teams/{team['id']}/members",
        json={"email": unique_email("queuefailee"), "first_name": "Sam", "last_name": "Lee"},
        headers=auth(owner_token),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["email_queued"] is False
    assert body["invitation_url"] in body["message"]


def test_expiry_sweep_is_scheduled():
    schedule = celery_app.conf.beat_schedule["expire-stale-invitations"]
    assert schedule["task"] == "focusforge.workers.invitation_tasks.expire_invitations"
    assert schedule["schedule"] == float(settings.INVITATION_SWEEP_INTERVAL_SECONDS)
