"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from pictura.core.config import settings

# Bcrypt cost (rounds); 10 keeps login latency low on small instances.
BCRYPT_ROUNDS = 10

# Min/max lengths for account fields (input validation).
NAME_MIN_LEN = 1
NAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 6
# bcrypt only reads the first 72 bytes; longer passwords are rejected, never cut.
PASSWORD_MAX_BYTES = 72
BIO_MAX_LEN = 500
PHONE_MAX_LEN = 32
EMAIL_MAX_LEN = 255


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Raises ValueError past PASSWORD_MAX_BYTES."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password exceeds {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time inside bcrypt)."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(sub: str | int, expires_minutes: int | None = None) -> str:
    """
    Create a JWT access token carrying only sub (account id), iat and exp.

    Role and block state are deliberately absent: they are looked up on every request.
    """
    now = datetime.now(UTC)
    minutes = settings.JWT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    payload: dict[str, Any] = {
        "sub": str(sub),
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
