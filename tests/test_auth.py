"""
Authentication endpoint tests.

Verifies that:
- Signup issues tokens and rejects duplicates and weak input
- Login never reveals which credential was wrong
- Refresh tokens rotate and cannot be replayed
- Logout revokes the access token
- Profile, password and notification preferences can be managed
"""

from helpers import auth, login, register, unique_email


# ---------------------------------------------------------------------------
# 1. Signup
# ---------------------------------------------------------------------------

async def test_signup_returns_tokens_and_user(client):
    email = unique_email("signup")
    data = await register(client, email, display_name="Ada Lovelace")

    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["expires_in"] > 0
    assert data["user"]["email"] == email
    assert data["user"]["display_name"] == "Ada Lovelace"
    assert "password_hash" not in data["user"]


async def test_register_alias_still_works(client):
    resp = await client.post("/api/auth/register", json={
        "email": unique_email("alias"),
        "password": "password123",
        "display_name": "Alias User",
    })
    assert resp.status_code == 201


async def test_signup_duplicate_email_rejected(client):
    email = unique_email("dup")
    await register(client, email)

    resp = await client.post("/api/auth/signup", json={
        "email": email.upper(),
        "password": "password123",
        "display_name": "Second",
    })
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "EMAIL_TAKEN"


async def test_signup_password_without_number_rejected(client):
    resp = await client.post("/api/auth/signup", json={
        "email": unique_email("weak"),
        "password": "passwordonly",
        "display_name": "Weak",
    })
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


async def test_signup_short_password_rejected(client):
    resp = await client.post("/api/auth/signup", json={
        "email": unique_email("short"),
        "password": "abc1",
        "display_name": "Short",
    })
    assert resp.status_code == 400


async def test_signup_invalid_email_rejected(client):
    resp = await client.post("/api/auth/signup", json={
        "email": "not-an-email",
        "password": "password123",
        "display_name": "Bad Email",
    })
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# 2. Login
# ---------------------------------------------------------------------------

async def test_login_success(client):
    email = unique_email("login")
    await register(client, email)

    token = await login(client, email)
    resp = await client.get("/api/auth/me", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["email"] == email


async def test_login_wrong_password(client):
    email = unique_email("wrongpw")
    await register(client, email)

    resp = await client.post("/api/auth/login", json={"email": email, "password": "nope12345"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_CREDENTIALS"


async def test_login_unknown_email_same_error(client):
    resp = await client.post("/api/auth/login", json={
        "email": unique_email("ghost"),
        "password": "password123",
    })
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_CREDENTIALS"


# ---------------------------------------------------------------------------
# 3. Token handling
# ---------------------------------------------------------------------------

async def test_me_without_token(client):
    resp = await client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "MISSING_TOKEN"


async def test_me_with_garbage_token(client):
    resp = await client.get("/api/auth/me", headers=auth("not.a.jwt"))
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_TOKEN"


async def test_refresh_token_cannot_be_used_as_access_token(client):
    data = await register(client, unique_email("refasacc"))

    resp = await client.get("/api/auth/me", headers=auth(data["refresh_token"]))
    assert resp.status_code == 401


async def test_refresh_rotates_tokens(client):
    data = await register(client, unique_email("refresh"))

    resp = await client.post("/api/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert resp.status_code == 200
    rotated = resp.json()
    assert rotated["refresh_token"] != data["refresh_token"]

    # The old refresh token is gone after rotation
    replay = await client.post("/api/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert replay.status_code == 401
    assert replay.json()["detail"]["code"] == "TOKEN_REVOKED"


async def test_refresh_with_invalid_token(client):
    resp = await client.post("/api/auth/refresh", json={"refresh_token": "garbage"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_TOKEN"


async def test_logout_revokes_access_and_refresh(client):
    data = await register(client, unique_email("logout"))
    token = data["access_token"]

    resp = await client.post(
        "/api/auth/logout",
        json={"refresh_token": data["refresh_token"]},
        headers=auth(token),
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out"

    me = await client.get("/api/auth/me", headers=auth(token))
    assert me.status_code == 401
    assert me.json()["detail"]["code"] == "TOKEN_REVOKED"

    refresh = await client.post("/api/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert refresh.status_code == 401


# ---------------------------------------------------------------------------
# 4. Profile and password
# ---------------------------------------------------------------------------

async def test_update_profile(client):
    data = await register(client, unique_email("profile"))

    resp = await client.put(
        "/api/auth/profile",
        json={"display_name": "  New Name  "},
        headers=auth(data["access_token"]),
    )
    assert resp.status_code == 200
    assert resp.json()["display_name"] == "New Name"


async def test_change_password(client):
    email = unique_email("chpw")
    data = await register(client, email)
    headers = auth(data["access_token"])

    wrong = await client.put(
        "/api/auth/change-password",
        json={"current_password": "wrongpass1", "new_password": "newpass456"},
        headers=headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["detail"]["code"] == "INVALID_PASSWORD"

    ok = await client.put(
        "/api/auth/change-password",
        json={"current_password": "password123", "new_password": "newpass456"},
        headers=headers,
    )
    assert ok.status_code == 200

    old = await client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert old.status_code == 401
    await login(client, email, "newpass456")


# ---------------------------------------------------------------------------
# 5. Notification preferences
# ---------------------------------------------------------------------------

async def test_notification_preferences_default_and_partial_update(client):
    data = await register(client, unique_email("prefs"))
    headers = auth(data["access_token"])

    resp = await client.get("/api/auth/notification-preferences", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "email_notifications": True,
        "new_comments": True,
        "ticket_assignment": True,
    }

    resp = await client.put(
        "/api/auth/notification-preferences",
        json={"new_comments": False},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "email_notifications": True,
        "new_comments": False,
        "ticket_assignment": True,
    }


# ---------------------------------------------------------------------------
# 6. Service endpoints
# ---------------------------------------------------------------------------

async def test_health_and_root(client):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"

    root = await client.get("/")
    assert root.json()["message"] == "Focus Forge API"
