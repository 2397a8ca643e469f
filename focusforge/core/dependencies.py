"""
Request-scoped dependencies: the Redis token store and the signed-in user.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.config import settings
from focusforge.core.database import get_db
from focusforge.core.security import blacklist_redis_key, decode_access_token
from focusforge.models.user import User

# auto_error is off so a missing header gets our own 401 body instead of a 403
bearer_scheme = HTTPBearer(auto_error=False)

_redis_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = aioredis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    return _redis_client


async def close_redis() -> None:
    """Release the shared client on shutdown."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _access_claims(credentials: HTTPAuthorizationCredentials | None) -> dict[str, Any]:
    if credentials is None:
        raise _unauthorized("MISSING_TOKEN", "Authorization header required")
    try:
        return decode_access_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("INVALID_TOKEN", "Token is invalid or expired")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> User:
    """
    Resolve the bearer token to an active user.

    Every failure is a 401 with its own code: MISSING_TOKEN, INVALID_TOKEN,
    TOKEN_REVOKED (jti blacklisted by logout) or USER_NOT_FOUND.
    """
    claims = _access_claims(credentials)
    try:
        user_id = UUID(claims.get("sub", ""))
    except ValueError:
        raise _unauthorized("INVALID_TOKEN", "Token is invalid or expired")

    if await redis.exists(blacklist_redis_key(claims.get("jti", ""))):
        raise _unauthorized("TOKEN_REVOKED", "Token has been revoked")

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise _unauthorized("USER_NOT_FOUND", "User not found or inactive")
    return user


async def get_access_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Decoded claims of the caller's access token, for routes that need its jti."""
    return _access_claims(credentials)
