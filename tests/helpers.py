"""
Shared request helpers for the API tests.
"""

import uuid

import httpx


def unique_email(prefix: str) -> str:
    """Generate a unique email per test to avoid conflicts."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(
    client: httpx.AsyncClient,
    email: str,
    password: str = "password123",
    display_name: str = "Test User",
) -> dict:
    resp = await client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "display_name": display_name,
    })
    assert resp.status_code == 201, f"Signup failed: {resp.text}"
    return resp.json()


async def signup_user(client: httpx.AsyncClient, prefix: str, display_name: str = "Test User") -> tuple[str, dict]:
    """Register a fresh user. Returns (access_token, user)."""
    data = await register(client, unique_email(prefix), display_name=display_name)
    return data["access_token"], data["user"]


async def login(client: httpx.AsyncClient, email: str, password: str = "password123") -> str:
    resp = await client.post("/api/auth/login", json={
        "email": email,
        "password": password,
    })
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    return resp.json()["access_token"]


async def create_project(client: httpx.AsyncClient, token: str, name: str = "Apollo", **fields) -> dict:
    resp = await client.post(
        "/api/projects",
        json={"name": name, **fields},
        headers=auth(token),
    )
    assert resp.status_code == 201, f"Create project failed: {resp.text}"
    return resp.json()


async def create_ticket(client: httpx.AsyncClient, token: str, project_id: str, title: str = "Fix login", **fields) -> dict:
    resp = await client.post(
        f"/api/tickets/project/{project_id}",
        json={"title": title, **fields},
        headers=auth(token),
    )
    assert resp.status_code == 201, f"Create ticket failed: {resp.text}"
    return resp.json()


async def create_team(client: httpx.AsyncClient, token: str, name: str = "Platform") -> dict:
    resp = await client.post("/api/teams", json={"name": name}, headers=auth(token))
    assert resp.status_code == 201, f"Create team failed: {resp.text}"
    return resp.json()


async def invite_to_project(
    client: httpx.AsyncClient,
    token: str,
    project_id: str,
    email: str,
    role: str = "member",
) -> dict:
    resp = await client.post(
        f"/api/projects/{project_id}/invite",
        json={"email": email, "first_name": "Jane", "last_name": "Doe", "role": role},
        headers=auth(token),
    )
    assert resp.status_code == 201, f"Project invite failed: {resp.text}"
    return resp.json()["invitation"]


async def invite_to_team(
    client: httpx.AsyncClient,
    token: str,
    team_id: str,
    email: str,
    role: str = "member",
) -> dict:
    resp = await client.post(
        f"/api/teams/{team_id}/members",
        json={"email": email, "first_name": "Sam", "last_name": "Lee", "role": role},
        headers=auth(token),
    )
    assert resp.status_code == 201, f"Team invite failed: {resp.text}"
    return resp.json()["invitation"]


async def add_project_member(
    client: httpx.AsyncClient,
    owner_token: str,
    project_id: str,
    member_token: str,
    member_email: str,
    role: str = "member",
) -> None:
    invitation = await invite_to_project(client, owner_token, project_id, member_email, role)
    resp = await client.post(
        f"/api/projects/invitations/{invitation['token']}/accept",
        headers=auth(member_token),
    )
    assert resp.status_code == 200, f"Accept project invite failed: {resp.text}"


async def notifications_for(client: httpx.AsyncClient, token: str) -> list[dict]:
    resp = await client.get("/api/notifications", headers=auth(token))
    assert resp.status_code == 200, resp.text
    return resp.json()["notifications"]
