"""Request/response schemas for auth and profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """
    Registration input. name, email and password are required; phone is optional.

    Fields default to empty so that missing values reach the account service,
    which reports them with a single, consistent validation message.
    """

    name: str = Field(default="", description="Display name (1-50 chars)")
    email: str = Field(default="", description="Email; stored lowercase")
    password: str = Field(default="", description="Password (6 characters to 72 UTF-8 bytes)")
    phone: str | None = Field(default=None, description="Optional phone number")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(default="", description="Email")
    password: str = Field(default="", description="Password")


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields keep their current value."""

    name: str | None = None
    phone: str | None = None
    bio: str | None = None


class AuthData(BaseModel):
    """Identity plus bearer token returned by register and login."""

    id: int
    name: str
    email: str
    phone: str
    role: str
    avatar: str
    token: str


class UserProfile(BaseModel):
    """Account as returned to its owner and to admins (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    role: str
    avatar: str
    bio: str
    is_active: bool
    is_blocked: bool
    block_reason: str
    last_login: datetime | None = None
    login_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
