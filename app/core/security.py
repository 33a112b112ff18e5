"""
Credential Helpers

Password hashing (werkzeug) and bearer token signing (PyJWT).
Plaintext passwords and raw tokens are never logged.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from werkzeug.security import generate_password_hash, check_password_hash

from app.core.config import Settings


def hash_password(password: str) -> str:
    """One-way hash a plaintext password."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(claims: dict[str, Any], settings: Settings) -> str:
    """
    Sign a time-limited bearer token.

    Args:
        claims: Identity claims to embed (id, role, name, email)
        settings: Provides secret, algorithm and lifetime

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(minutes=settings.token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Verify signature and expiry of a bearer token.

    Raises:
        jwt.PyJWTError: If the token is malformed, tampered with or expired
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["exp"]},
    )
