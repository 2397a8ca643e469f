"""
Ticket endpoint tests.

Verifies that:
- Tickets are scoped to projects the caller can access
- Assignees are validated, de-duplicated and carry project counts
- Filters and ordering on the ticket list
- Assignment and status-change notifications reach the right people
- Only the creator or project owner can delete
"""

import uuid

from helpers import (
    add_project_member,
    auth,
    create_project,
    create_team,
    create_ticket,
    notifications_for,
    signup_user,
)


# ---------------------------------------------------------------------------
# 1. Create
# ---------------------------------------------------------------------------

async def test_create_ticket_defaults(client):
    token, user = await signup_user(client, "tkt")
    project = await create_project(client, token)

    ticket = await create_ticket(client, token, project["id"], title="  Broken button  ")

    assert ticket["title"] == "Broken button"
    assert ticket["status"] == "todo"
    assert ticket["priority"] == "medium"
    assert ticket["type"] == ""
    assert ticket["project_id"] == project["id"]
    assert ticket["creator_id"] == user["id"]
    assert ticket["assignees"] == []
    assert ticket["team"] is None


async def test_create_ticket_requires_project_access(client):
    owner_token, _ = await signup_user(client, "tktowner")
    outsider_token, _ = await signup_user(client, "tktout")
    project = await create_project(client, owner_token)

    resp = await client.post(
        f"/api/tickets/project/{project['id']}",
        json={"title": "Sneaky"},
        headers=auth(outsider_token),
    )
    assert resp.status_code == 403


async def test_create_ticket_blank_title_rejected(client):
    token, _ = await signup_user(client, "tktblank")
    project = await create_project(client, token)

    resp = await client.post(
        f"/api/tickets/project/{project['id']}",
        json={"title": "   "},
        headers=auth(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


async def test_assignees_deduplicated_with_project_count(client):
    token, user = await signup_user(client, "tktassign")
    project = await create_project(client, token)
    await create_project(client, token, name="Second")

    ticket = await create_ticket(
        client, token, project["id"], assignee_ids=[user["id"], user["id"]]
    )

    assert len(ticket["assignees"]) == 1
    assert ticket["assignees"][0]["id"] == user["id"]
    assert ticket["assignees"][0]["project_count"] == 2


async def test_unknown_assignee_rejected(client):
    token, _ = await signup_user(client, "tktunknown")
    project = await create_project(client, token)

    resp = await client.post(
        f"/api/tickets/project/{project['id']}",
        json={"title": "Ghost", "assignee_ids": [str(uuid.uuid4())]},
        headers=auth(token),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_ASSIGNEE"


async def test_ticket_with_team(client):
    token, _ = await signup_user(client, "tktteam")
    project = await create_project(client, token)
    team = await create_team(client, token, name="QA")

    ticket = await create_ticket(client, token, project["id"], team_id=team["id"])
    assert ticket["team_id"] == team["id"]
    assert ticket["team"]["name"] == "QA"

    bad = await client.post(
        f"/api/tickets/project/{project['id']}",
        json={"title": "No team", "team_id": str(uuid.uuid4())},
        headers=auth(token),
    )
    assert bad.status_code == 400
    assert bad.json()["detail"]["code"] == "INVALID_TEAM"


# ---------------------------------------------------------------------------
# 2. List / get
# ---------------------------------------------------------------------------

async def test_list_tickets_filters_and_order(client):
    token, _ = await signup_user(client, "tktlist")
    project = await create_project(client, token)

    await create_ticket(client, token, project["id"], title="First", priority="low")
    await create_ticket(client, token, project["id"], title="Second", status="done", priority="high")
    await create_ticket(client, token, project["id"], title="Third", priority="high")

    all_resp = await client.get(f"/api/tickets/project/{project['id']}", headers=auth(token))
    assert all_resp.status_code == 200
    assert [t["title"] for t in all_resp.json()["tickets"]] == ["Third", "Second", "First"]

    high = await client.get(
        f"/api/tickets/project/{project['id']}",
        params={"priority": "high"},
        headers=auth(token),
    )
    assert high.json()["total"] == 2

    done = await client.get(
        f"/api/tickets/project/{project['id']}",
        params={"status": "done", "priority": "high"},
        headers=auth(token),
    )
    assert [t["title"] for t in done.json()["tickets"]] == ["Second"]


async def test_list_tickets_invalid_filter(client):
    token, _ = await signup_user(client, "tktbadfilter")
    project = await create_project(client, token)

    resp = await client.get(
        f"/api/tickets/project/{project['id']}",
        params={"status": "blocked"},
        headers=auth(token),
    )
    assert resp.status_code == 400


async def test_get_ticket_not_found(client):
    token, _ = await signup_user(client, "tktnf")
    resp = await client.get(f"/api/tickets/{uuid.uuid4()}", headers=auth(token))
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "TICKET_NOT_FOUND"


async def test_outsider_cannot_read_ticket(client):
    owner_token, _ = await signup_user(client, "tktreadowner")
    outsider_token, _ = await signup_user(client, "tktreadout")
    project = await create_project(client, owner_token)
    ticket = await create_ticket(client, owner_token, project["id"])

    resp = await client.get(f"/api/tickets/{ticket['id']}", headers=auth(outsider_token))
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# 3. Update and notifications
# ---------------------------------------------------------------------------

async def test_update_ticket_partial(client):
    token, _ = await signup_user(client, "tktupd")
    project = await create_project(client, token)
    ticket = await create_ticket(client, token, project["id"], description="details")

    resp = await client.put(
        f"/api/tickets/{ticket['id']}",
        json={"priority": "urgent"},
        headers=auth(token),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["priority"] == "urgent"
    assert body["title"] == ticket["title"]
    assert body["description"] == "details"


async def test_assignment_notifications_only_for_new_assignees(client):
    owner_token, _ = await signup_user(client, "notifowner")
    a_token, a = await signup_user(client, "notifa")
    b_token, b = await signup_user(client, "notifb")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], a_token, a["email"])
    await add_project_member(client, owner_token, project["id"], b_token, b["email"])

    ticket = await create_ticket(client, owner_token, project["id"], assignee_ids=[a["id"]])
    a_notes = [n for n in await notifications_for(client, a_token) if n["type"] == "ticket_assignment"]
    assert len(a_notes) == 1
    assert a_notes[0]["entity_type"] == "ticket"
    assert a_notes[0]["entity_id"] == ticket["id"]

    resp = await client.put(
        f"/api/tickets/{ticket['id']}",
        json={"assignee_ids": [a["id"], b["id"]]},
        headers=auth(owner_token),
    )
    assert resp.status_code == 200
    assert {u["id"] for u in resp.json()["assignees"]} == {a["id"], b["id"]}

    a_notes = [n for n in await notifications_for(client, a_token) if n["type"] == "ticket_assignment"]
    b_notes = [n for n in await notifications_for(client, b_token) if n["type"] == "ticket_assignment"]
    assert len(a_notes) == 1
    assert len(b_notes) == 1


async def test_assignment_notification_respects_preference(client):
    owner_token, _ = await signup_user(client, "prefowner")
    a_token, a = await signup_user(client, "prefa")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], a_token, a["email"])

    await client.put(
        "/api/auth/notification-preferences",
        json={"ticket_assignment": False},
        headers=auth(a_token),
    )
    await create_ticket(client, owner_token, project["id"], assignee_ids=[a["id"]])

    notes = [n for n in await notifications_for(client, a_token) if n["type"] == "ticket_assignment"]
    assert notes == []


async def test_status_change_notifies_creator_and_assignees_except_actor(client):
    owner_token, owner = await signup_user(client, "statowner")
    a_token, a = await signup_user(client, "stata", display_name="Alex")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], a_token, a["email"])
    ticket = await create_ticket(client, owner_token, project["id"], assignee_ids=[a["id"]])

    resp = await client.put(
        f"/api/tickets/{ticket['id']}",
        json={"status": "in_progress"},
        headers=auth(a_token),
    )
    assert resp.status_code == 200

    owner_updates = [n for n in await notifications_for(client, owner_token) if n["type"] == "ticket_update"]
    actor_updates = [n for n in await notifications_for(client, a_token) if n["type"] == "ticket_update"]
    assert len(owner_updates) == 1
    assert "todo" in owner_updates[0]["message"]
    assert "in_progress" in owner_updates[0]["message"]
    assert actor_updates == []


async def test_same_status_sends_no_update(client):
    owner_token, _ = await signup_user(client, "samestat")
    a_token, a = await signup_user(client, "samestata")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], a_token, a["email"])
    ticket = await create_ticket(client, owner_token, project["id"], assignee_ids=[a["id"]])

    await client.put(f"/api/tickets/{ticket['id']}", json={"status": "todo"}, headers=auth(owner_token))

    updates = [n for n in await notifications_for(client, a_token) if n["type"] == "ticket_update"]
    assert updates == []


# ---------------------------------------------------------------------------
# 4. Delete
# ---------------------------------------------------------------------------

async def test_delete_ticket_permissions(client):
    owner_token, _ = await signup_user(client, "tktdelowner")
    member_token, member = await signup_user(client, "tktdelmember")
    project = await create_project(client, owner_token)
    await add_project_member(client, owner_token, project["id"], member_token, member["email"])

    owners_ticket = await create_ticket(client, owner_token, project["id"], title="Owner's")
    members_ticket = await create_ticket(client, member_token, project["id"], title="Member's")

    denied = await client.delete(f"/api/tickets/{owners_ticket['id']}", headers=auth(member_token))
    assert denied.status_code == 403

    own = await client.delete(f"/api/tickets/{members_ticket['id']}", headers=auth(member_token))
    assert own.status_code == 200

    by_owner = await client.delete(f"/api/tickets/{owners_ticket['id']}", headers=auth(owner_token))
    assert by_owner.status_code == 200

    listed = await client.get(f"/api/tickets/project/{project['id']}", headers=auth(owner_token))
    assert listed.json()["total"] == 0
