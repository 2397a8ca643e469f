"""
Credential helpers for Focus Forge.

Covers the password policy, bcrypt hashing, the access/refresh JWT pair
and the random tokens embedded in invitation links.
"""

from __future__ import annotations

import enum
import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt as _bcrypt
from jose import JWTError, jwt

from focusforge.core.config import settings

MIN_PASSWORD_LENGTH = 8

# bcrypt ignores everything past 72 bytes
_BCRYPT_MAX_BYTES = 72
_BCRYPT_ROUNDS = 12


class TokenType(str, enum.Enum):
    access = "access"
    refresh = "refresh"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def password_problem(password: str) -> str | None:
    """Return a human readable reason the password is too weak, or None."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not any(ch.isdigit() for ch in password):
        return "Password must contain at least one number"
    return None


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    hashed = _bcrypt.hashpw(_password_bytes(password), _bcrypt.gensalt(rounds=_BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return _bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------

def _encode(user_id: str, token_type: TokenType, lifetime: timedelta, jti: str) -> str:
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": user_id,
        "jti": jti,
        "type": token_type.value,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, expected: TokenType) -> dict[str, Any]:
    claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if claims.get("type") != expected.value:
        raise JWTError(f"Expected a {expected.value} token")
    return claims


def create_access_token(user_id: str, jti: str | None = None) -> str:
    """
    Issue an access token for ``user_id``.

    The jti is what logout blacklists, so callers that need to revoke the
    token later may pass their own.
    """
    lifetime = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(user_id, TokenType.access, lifetime, jti or str(uuid.uuid4()))


def create_refresh_token(user_id: str) -> tuple[str, str]:
    """Issue a refresh token and return it with its jti for the Redis registry."""
    jti = str(uuid.uuid4())
    lifetime = timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(user_id, TokenType.refresh, lifetime, jti), jti


def decode_access_token(token: str) -> dict[str, Any]:
    """Raises JWTError on a bad signature, expiry or a refresh token."""
    return _decode(token, TokenType.access)


def decode_refresh_token(token: str) -> dict[str, Any]:
    """Raises JWTError on a bad signature, expiry or an access token."""
    return _decode(token, TokenType.refresh)


def refresh_token_redis_key(user_id: str, jti: str) -> str:
    return f"refresh:{user_id}:{jti}"


def blacklist_redis_key(jti: str) -> str:
    return f"blacklist:{jti}"


# ---------------------------------------------------------------------------
# Invitation links
# ---------------------------------------------------------------------------

def generate_invitation_token(nbytes: int = 32) -> str:
    """Random hex string, two characters per byte."""
    return secrets.token_hex(nbytes)
