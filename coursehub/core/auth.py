"""Bearer JWTs identifying the calling user.

The subject claim carries the user id as a string.
"""

from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from coursehub.settings import settings

_DEFAULT_SECRET = "dev-secret-key-change-in-production"

if settings.environment == "production" and settings.jwt_secret_key == _DEFAULT_SECRET:
    raise RuntimeError(
        "SECURITY ERROR: JWT_SECRET_KEY must be set in production. "
        "Refusing to sign user tokens with the development secret."
    )


def create_access_token(
    user_id: int, expires_delta: timedelta | None = None, **claims: Any
) -> str:
    """Sign a token for a user.

    Args:
        user_id: User the token identifies
        expires_delta: Lifetime, defaults to jwt_access_token_expire_minutes
        **claims: Extra claims to include

    Returns:
        Encoded JWT
    """
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload = {**claims, "sub": str(user_id), "exp": datetime.utcnow() + lifetime}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify a token and return its claims, or None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def user_id_from_token(token: str) -> int | None:
    """Return the user id a valid token was issued for."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
