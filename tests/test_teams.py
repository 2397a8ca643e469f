"""
Team endpoint tests.

Verifies that:
- Teams form a shared directory visible to every signed-in user
- Only the creator or a team admin can edit, delete or manage members
- Member rows carry project counts
- The participants directory spans the caller's projects
"""

import uuid

from helpers import (
    add_project_member,
    auth,
    create_project,
    create_team,
    invite_to_team,
    signup_user,
)


async def _join_team(client, owner_token: str, team_id: str, member_token: str, email: str, role: str = "member") -> dict:
    invitation = await invite_to_team(client, owner_token, team_id, email, role)
    resp = await client.post(
        f"/api/teams/invitations/{invitation['id']}/accept", headers=auth(member_token)
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["team"]


# ---------------------------------------------------------------------------
# 1. CRUD
# ---------------------------------------------------------------------------

async def test_create_and_get_team(client):
    token, user = await signup_user(client, "team")

    team = await create_team(client, token, name="  Platform  ")
    assert team["name"] == "Platform"
    assert team["created_by"] == user["id"]
    assert team["members"] == []

    resp = await client.get(f"/api/teams/{team['id']}", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["id"] == team["id"]


async def test_team_name_required(client):
    token, _ = await signup_user(client, "teamblank")
    resp = await client.post("/api/teams", json={"name": " "}, headers=auth(token))
    assert resp.status_code == 400


async def test_list_teams_visible_to_everyone(client):
    token_a, _ = await signup_user(client, "teamlista")
    token_b, _ = await signup_user(client, "teamlistb")
    await create_team(client, token_a, name="Alpha")
    await create_team(client, token_a, name="Beta")

    resp = await client.get("/api/teams", headers=auth(token_b))
    assert resp.status_code == 200
    assert resp.json()["total"] == 2
    assert [t["name"] for t in resp.json()["teams"]] == ["Beta", "Alpha"]


async def test_teams_require_auth(client):
    resp = await client.get("/api/teams")
    assert resp.status_code == 401


async def test_get_missing_team(client):
    token, _ = await signup_user(client, "teammissing")
    resp = await client.get(f"/api/teams/{uuid.uuid4()}", headers=auth(token))
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "TEAM_NOT_FOUND"


async def test_update_and_delete_require_manager(client):
    owner_token, _ = await signup_user(client, "teamupdowner")
    other_token, _ = await signup_user(client, "teamupdother")
    team = await create_team(client, owner_token)

    denied = await client.put(f"/api/teams/{team['id']}", json={"name": "Mine"}, headers=auth(other_token))
    assert denied.status_code == 403
    assert denied.json()["detail"]["code"] == "INSUFFICIENT_ROLE"

    ok = await client.put(
        f"/api/teams/{team['id']}", json={"description": "Infra folks"}, headers=auth(owner_token)
    )
    assert ok.status_code == 200
    assert ok.json()["description"] == "Infra folks"
    assert ok.json()["name"] == team["name"]

    denied_delete = await client.delete(f"/api/teams/{team['id']}", headers=auth(other_token))
    assert denied_delete.status_code == 403

    deleted = await client.delete(f"/api/teams/{team['id']}", headers=auth(owner_token))
    assert deleted.status_code == 200
    assert deleted.json()["id"] == team["id"]

    gone = await client.get(f"/api/teams/{team['id']}", headers=auth(owner_token))
    assert gone.status_code == 404


# ---------------------------------------------------------------------------
# 2. Members
# ---------------------------------------------------------------------------

async def test_member_has_project_count(client):
    owner_token, _ = await signup_user(client, "teamcount")
    member_token, member = await signup_user(client, "teamcountm")
    team = await create_team(client, owner_token)
    await create_project(client, member_token, name="One")
    await create_project(client, member_token, name="Two")

    joined = await _join_team(client, owner_token, team["id"], member_token, member["email"])
    assert len(joined["members"]) == 1
    assert joined["members"][0]["user_id"] == member["id"]
    assert joined["members"][0]["project_count"] == 2


async def test_team_admin_can_manage_members(client):
    owner_token, _ = await signup_user(client, "teamadmowner")
    admin_token, admin = await signup_user(client, "teamadm")
    member_token, member = await signup_user(client, "teamadmm")
    team = await create_team(client, owner_token)

    await _join_team(client, owner_token, team["id"], admin_token, admin["email"], role="admin")
    joined = await _join_team(client, owner_token, team["id"], member_token, member["email"])
    member_row = next(m for m in joined["members"] if m["user_id"] == member["id"])

    resp = await client.put(
        f"/api/teams/{team['id']}/members/{member_row['id']}",
        json={"first_name": "Samuel", "phone": "+1 555 0100", "role": "admin"},
        headers=auth(admin_token),
    )
    assert resp.status_code == 200
    updated = next(m for m in resp.json()["members"] if m["id"] == member_row["id"])
    assert updated["first_name"] == "Samuel"
    assert updated["phone"] == "+1 555 0100"
    assert updated["role"] == "admin"


async def test_plain_member_cannot_manage_members(client):
    owner_token, _ = await signup_user(client, "teampm")
    member_token, member = await signup_user(client, "teampmm")
    team = await create_team(client, owner_token)
    joined = await _join_team(client, owner_token, team["id"], member_token, member["email"])
    member_row = joined["members"][0]

    resp = await client.delete(
        f"/api/teams/{team['id']}/members/{member_row['id']}", headers=auth(member_token)
    )
    assert resp.status_code == 403


async def test_remove_member(client):
    owner_token, _ = await signup_user(client, "teamrm")
    member_token, member = await signup_user(client, "teamrmm")
    team = await create_team(client, owner_token)
    joined = await _join_team(client, owner_token, team["id"], member_token, member["email"])
    member_row = joined["members"][0]

    resp = await client.delete(
        f"/api/teams/{team['id']}/members/{member_row['id']}", headers=auth(owner_token)
    )
    assert resp.status_code == 200
    assert resp.json()["members"] == []

    missing = await client.delete(
        f"/api/teams/{team['id']}/members/{member_row['id']}", headers=auth(owner_token)
    )
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "MEMBER_NOT_FOUND"


# ---------------------------------------------------------------------------
# 3. Participants
# ---------------------------------------------------------------------------

async def test_participants_across_projects(client):
    owner_token, owner = await signup_user(client, "partowner", display_name="Zed Owner")
    member_token, member = await signup_user(client, "partmember", display_name="Amy Member")
    outsider_token, _ = await signup_user(client, "partout", display_name="Out Sider")

    p1 = await create_project(client, owner_token, name="P1")
    p2 = await create_project(client, owner_token, name="P2")
    await add_project_member(client, owner_token, p1["id"], member_token, member["email"])
    await add_project_member(client, owner_token, p2["id"], member_token, member["email"])
    await create_project(client, outsider_token, name="Elsewhere")

    resp = await client.get("/api/teams/participants", headers=auth(owner_token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2

    # Sorted by display name
    amy, zed = body["participants"]
    assert amy["id"] == member["id"]
    assert amy["first_name"] == "Amy"
    assert amy["last_name"] == "Member"
    assert amy["role"] == "member"
    assert amy["project_count"] == 2
    assert set(amy["project_ids"]) == {p1["id"], p2["id"]}
    assert zed["id"] == owner["id"]
    assert zed["role"] == "owner"
