"""
Account lifecycle: registration, login, profile updates, moderation (block/delete)
and idempotent administrator provisioning.

Passwords are hashed with bcrypt before they reach the database and are only ever
compared through bcrypt. Login failures for an unknown email and for a wrong password
share one message so callers cannot probe which emails are registered.
"""

import logging
import re
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pictura.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from pictura.core.security import (
    BIO_MAX_LEN,
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LEN,
    PHONE_MAX_LEN,
    hash_password,
    verify_password,
)
from pictura.models import Post, PostComment, PostLike, PostReport, User
from pictura.models.user import ROLE_ADMIN, ROLE_USER
from pictura.schemas.auth import ProfileUpdateRequest, RegisterRequest
from pictura.services.guard import Identity, ensure_usable, issue_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
DEFAULT_BLOCK_REASON = "Blocked by administrator"

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_name(name: str) -> str:
    name = name.strip()
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        raise ValidationError(f"Name must be between {NAME_MIN_LEN} and {NAME_MAX_LEN} characters")
    return name


def _validate_email(email: str) -> str:
    if len(email) > EMAIL_MAX_LEN or not EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email")
    return email


def _validate_password(password: str) -> str:
    if len(password) < PASSWORD_MIN_LEN:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when encoded")
    return password


def _validate_phone(phone: str | None) -> str:
    phone = (phone or "").strip()
    if len(phone) > PHONE_MAX_LEN:
        raise ValidationError(f"Phone must be at most {PHONE_MAX_LEN} characters")
    return phone


def _validate_bio(bio: str) -> str:
    if len(bio) > BIO_MAX_LEN:
        raise ValidationError(f"Bio must be at most {BIO_MAX_LEN} characters")
    return bio


def _commit_new_account(db: Session, user: User) -> User:
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("A user with this email is already registered") from e
    db.refresh(user)
    return user


def register(db: Session, data: RegisterRequest) -> tuple[User, str]:
    """
    Create a regular account and return it with a freshly issued token.

    Raises ValidationError for missing or out-of-range fields and ConflictError
    when the (case-insensitive) email is taken.
    """
    email = normalize_email(data.email)
    if not data.name.strip() or not email or not data.password:
        raise ValidationError("Please fill in all required fields")
    name = _validate_name(data.name)
    _validate_email(email)
    _validate_password(data.password)
    phone = _validate_phone(data.phone)

    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError("A user with this email is already registered")

    user = _commit_new_account(
        db,
        User(
            name=name,
            email=email,
            phone=phone,
            password_hash=hash_password(data.password),
            role=ROLE_USER,
            is_active=True,
            is_blocked=False,
            block_reason="",
            login_count=0,
        ),
    )
    logger.info("Registered account id=%s", user.id)
    return user, issue_token(user.id)


def authenticate(db: Session, email: str, password: str) -> tuple[User, str]:
    """
    Check credentials, record the login and return the account with a new token.

    Raises AuthError with the same message for unknown email and wrong password,
    and BlockedError (with the block reason) for a blocked or inactive account.
    """
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Please provide email and password")

    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for email=%s", email)
        raise AuthError(INVALID_CREDENTIALS)
    ensure_usable(user)

    user.last_login = datetime.now(UTC)
    user.login_count = User.login_count + 1
    db.commit()
    db.refresh(user)
    logger.info("Login account id=%s count=%s", user.id, user.login_count)
    return user, issue_token(user.id)


def get_account(db: Session, account_id: int) -> User:
    user = db.get(User, account_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, account_id: int, data: ProfileUpdateRequest) -> User:
    """Apply a partial update of name, phone and bio; omitted or empty fields keep their value."""
    user = get_account(db, account_id)
    if data.name is not None and data.name.strip():
        user.name = _validate_name(data.name)
    if data.phone is not None and data.phone.strip():
        user.phone = _validate_phone(data.phone)
    if data.bio:
        user.bio = _validate_bio(data.bio)
    db.commit()
    db.refresh(user)
    return user


def set_blocked(
    db: Session,
    actor: Identity,
    target_id: int,
    blocked: bool,
    reason: str | None = None,
) -> User:
    """
    Block or unblock target_id on behalf of an administrator.

    Blocking records the reason (a default when none is given); unblocking clears it.
    Setting the state the account already has changes nothing.
    """
    if actor.id == target_id:
        raise ValidationError("You cannot block your own account")
    user = get_account(db, target_id)
    if blocked:
        user.is_blocked = True
        user.block_reason = (reason or "").strip() or DEFAULT_BLOCK_REASON
    else:
        user.is_blocked = False
        user.block_reason = ""
    db.commit()
    db.refresh(user)
    logger.info(
        "Account id=%s %s by admin id=%s",
        user.id,
        "blocked" if user.is_blocked else "unblocked",
        actor.id,
    )
    return user


def toggle_block(db: Session, actor: Identity, target_id: int, reason: str | None = None) -> User:
    """Flip the blocked flag of target_id (the moderation panel's block/unblock button)."""
    if actor.id == target_id:
        raise ValidationError("You cannot block your own account")
    user = get_account(db, target_id)
    return set_blocked(db, actor, target_id, not user.is_blocked, reason)


def delete_account(db: Session, actor: Identity, target_id: int) -> None:
    """
    Remove an account and everything it authored.

    The account's posts (with their likes, comments and reports) go first, then its
    likes, comments and reports on other posts, then the account itself.
    """
    if actor.id == target_id:
        raise ValidationError("You cannot delete your own account")
    user = get_account(db, target_id)

    posts = db.query(Post).filter(Post.user_id == user.id).all()
    for post in posts:
        db.delete(post)
    db.flush()
    for model in (PostLike, PostComment, PostReport):
        db.query(model).filter(model.user_id == user.id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info(
        "Deleted account id=%s with %s posts by admin id=%s",
        target_id,
        len(posts),
        actor.id,
    )


def ensure_admin(db: Session, email: str, password: str, name: str) -> tuple[User, bool]:
    """
    Make sure an account with email exists; create it with role admin if absent.

    Returns (account, created). An existing account is returned untouched, so running
    this at every startup is safe.
    """
    email = _validate_email(normalize_email(email))
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        return existing, False
    _validate_password(password)
    user = _commit_new_account(
        db,
        User(
            name=_validate_name(name),
            email=email,
            phone="",
            password_hash=hash_password(password),
            role=ROLE_ADMIN,
            is_active=True,
            is_blocked=False,
            block_reason="",
            login_count=0,
        ),
    )
    logger.info("Provisioned administrator account id=%s", user.id)
    return user, True
