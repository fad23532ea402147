"""Bearer token creation / verification (HS256 JWT)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from app.config import jwt_secret

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours


def create_access_token(
    user_id: str,
    role: Optional[str] = None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims: dict[str, Any] = {"userId": user_id, "sub": user_id, "exp": expire}
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and verify a token. Returns the claims dict or None."""
    try:
        return jwt.decode(token, jwt_secret(), algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None


def actor_id_from_claims(claims: dict[str, Any]) -> Optional[str]:
    """Return the actor id carried by the claims, or None if there is none."""
    for key in ("userId", "sub"):
        value = claims.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
