"""ORM model for application accounts (auth, RBAC and moderation state)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func

from pictura.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

DEFAULT_AVATAR = "default-avatar.jpg"


class User(Base):
    """
    Registered account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. Usability is derived from is_active and is_blocked;
    only an active, unblocked account may log in or act.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    avatar = Column(String(255), nullable=False, default=DEFAULT_AVATAR)
    bio = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    is_blocked = Column(Boolean, nullable=False, default=False, index=True)
    block_reason = Column(String(500), nullable=False, default="")
    last_login = Column(DateTime(timezone=True), nullable=True)
    login_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
