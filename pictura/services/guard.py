"""
Access token guard: issue and verify bearer tokens, and enforce role and ownership rules.

Tokens carry only the account id. Role, active and blocked state are read from the
database on every verification, so blocking an account revokes its outstanding tokens.
"""

import logging
from typing import Protocol

import jwt
from sqlalchemy.orm import Session

from pictura.core.errors import (
    AppError,
    BlockedError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
)
from pictura.core.security import create_access_token, decode_access_token
from pictura.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = "Your account is blocked. Contact the administrator."
INACTIVE_MESSAGE = "Your account is deactivated. Contact the administrator."


class Identity(Protocol):
    """Anything that exposes an account id and role (the ORM User, or any object with both attributes)."""

    id: int
    role: str


def issue_token(account_id: int) -> str:
    """Return a signed, expiring bearer token bound to account_id only."""
    return create_access_token(sub=account_id)


def ensure_usable(user: User) -> User:
    """Raise BlockedError unless the account is active and not blocked."""
    if user.is_blocked:
        reason = user.block_reason or ""
        message = f"{BLOCKED_MESSAGE} Reason: {reason}" if reason else BLOCKED_MESSAGE
        raise BlockedError(message, reason=reason)
    if not user.is_active:
        raise BlockedError(INACTIVE_MESSAGE)
    return user


def _account_id_from_token(token: str) -> int:
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Invalid token") from e
    sub = payload.get("sub")
    try:
        return int(sub)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid token payload") from e


def verify_token(db: Session, token: str) -> User:
    """
    Resolve a bearer token to a usable account.

    Raises InvalidTokenError (bad signature, format or expiry), NotFoundError
    (account deleted since issuance) or BlockedError (blocked or inactive).
    """
    if not token or not token.strip():
        raise InvalidTokenError("No token provided")
    account_id = _account_id_from_token(token.strip())
    user = db.get(User, account_id)
    if user is None:
        raise NotFoundError("User not found")
    return ensure_usable(user)


def optional_identity(db: Session, token: str | None) -> User | None:
    """Best-effort resolution for public reads: any token or account failure yields None."""
    if not token:
        return None
    try:
        return verify_token(db, token)
    except AppError as e:
        logger.debug("Ignoring unusable optional token: %s", e.message)
        return None


def require_role(identity: Identity, role: str = ROLE_ADMIN) -> Identity:
    """Raise ForbiddenError unless identity.role matches role exactly."""
    if identity.role != role:
        raise ForbiddenError(f"Access denied. The '{role}' role is required")
    return identity


def require_owner_or_role(
    identity: Identity,
    resource_owner_id: int,
    role: str = ROLE_ADMIN,
) -> Identity:
    """Allow the resource owner, or anyone holding role; otherwise raise ForbiddenError."""
    if identity.id == resource_owner_id or identity.role == role:
        return identity
    raise ForbiddenError("You do not have permission to modify this resource")
