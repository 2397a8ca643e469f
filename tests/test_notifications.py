"""
Notification endpoint tests.

Notifications are produced by ticket activity, so each test creates a
ticket assigned to a second user and inspects that user's inbox.
"""

import uuid

from helpers import (
    add_project_member,
    auth,
    create_project,
    create_ticket,
    signup_user,
)


async def _inbox_with_assignments(client, count: int = 2) -> tuple[str, str]:
    """Return (recipient_token, other_user_token) with count unread assignment notifications."""
    owner_token, _ = await signup_user(client, "inboxowner")
    a_token, a = await signup_user(client, "inboxa")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], a_token, a["email"])

    # Clear the invitation notification so only assignments remain
    await client.put("/api/notifications/mark-all-read", headers=auth(a_token))
    for i in range(count):
        await create_ticket(client, owner_token, project["id"], title=f"Task {i}", assignee_ids=[a["id"]])
    return a_token, owner_token


async def test_list_notifications_counts(client):
    token, _ = await _inbox_with_assignments(client, count=3)

    resp = await client.get("/api/notifications", headers=auth(token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["unread_count"] == 3
    assert body["total"] == 4  # three assignments plus the read invitation
    newest = body["notifications"][0]
    assert newest["type"] == "ticket_assignment"
    assert "Task 2" in newest["message"]
    assert newest["is_read"] is False


async def test_list_notifications_pagination(client):
    token, _ = await _inbox_with_assignments(client, count=3)

    resp = await client.get("/api/notifications", params={"skip": 1, "limit": 2}, headers=auth(token))
    assert resp.status_code == 200
    assert len(resp.json()["notifications"]) == 2

    bad = await client.get("/api/notifications", params={"limit": 0}, headers=auth(token))
    assert bad.status_code == 400


async def test_list_unread_only(client):
    token, _ = await _inbox_with_assignments(client, count=2)

    resp = await client.get("/api/notifications", params={"unread_only": "true"}, headers=auth(token))
    body = resp.json()
    assert len(body["notifications"]) == 2
    assert all(not n["is_read"] for n in body["notifications"])
    assert body["total"] == 3


async def test_mark_single_read_put_and_patch(client):
    token, _ = await _inbox_with_assignments(client, count=2)
    notes = (await client.get("/api/notifications", headers=auth(token))).json()["notifications"]

    put = await client.put(f"/api/notifications/{notes[0]['id']}/read", headers=auth(token))
    assert put.status_code == 200
    assert put.json()["is_read"] is True

    patch = await client.patch(f"/api/notifications/{notes[1]['id']}/read", headers=auth(token))
    assert patch.status_code == 200

    body = (await client.get("/api/notifications", headers=auth(token))).json()
    assert body["unread_count"] == 0


async def test_mark_all_read(client):
    token, _ = await _inbox_with_assignments(client, count=2)

    resp = await client.put("/api/notifications/mark-all-read", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    again = await client.put("/api/notifications/mark-all-read", headers=auth(token))
    assert again.json()["count"] == 0


async def test_cannot_touch_other_users_notifications(client):
    token, other_token = await _inbox_with_assignments(client, count=1)
    notes = (await client.get("/api/notifications", headers=auth(token))).json()["notifications"]
    note_id = notes[0]["id"]

    read = await client.put(f"/api/notifications/{note_id}/read", headers=auth(other_token))
    assert read.status_code == 404
    assert read.json()["detail"]["code"] == "NOTIFICATION_NOT_FOUND"

    delete = await client.delete(f"/api/notifications/{note_id}", headers=auth(other_token))
    assert delete.status_code == 404


async def test_delete_notification(client):
    token, _ = await _inbox_with_assignments(client, count=1)
    notes = (await client.get("/api/notifications", headers=auth(token))).json()["notifications"]

    resp = await client.delete(f"/api/notifications/{notes[0]['id']}", headers=auth(token))
    assert resp.status_code == 200

    body = (await client.get("/api/notifications", headers=auth(token))).json()
    assert notes[0]["id"] not in [n["id"] for n in body["notifications"]]

    missing = await client.delete(f"/api/notifications/{uuid.uuid4()}", headers=auth(token))
    assert missing.status_code == 404
