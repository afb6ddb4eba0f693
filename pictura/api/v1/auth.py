"""Register/login/profile routes and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pictura.core.database import get_db
from pictura.core.errors import InvalidTokenError, NotFoundError
from pictura.models import User
from pictura.models.user import ROLE_ADMIN
from pictura.schemas.auth import (
    AuthData,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserProfile,
)
from pictura.schemas.common import ApiResponse
from pictura.services import accounts
from pictura.services.guard import optional_identity, require_role, verify_token

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Dependency: require a valid Bearer token for an active, unblocked account."""
    if credentials is None:
        raise InvalidTokenError("Not authenticated: no token provided")
    try:
        return verify_token(db, credentials.credentials)
    except NotFoundError as e:
        # A token for a deleted account is an authentication failure, not a missing resource.
        raise InvalidTokenError(e.message) from e


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    require_role(current_user, ROLE_ADMIN)
    return current_user


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Dependency: the caller's account when a usable token is sent, otherwise None."""
    return optional_identity(db, credentials.credentials if credentials else None)


def _auth_data(user: User, token: str) -> AuthData:
    return AuthData(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone or "",
        role=user.role,
        avatar=user.avatar,
        token=token,
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthData]:
    """Create an account with role 'user' and return it with a bearer token."""
    user, token = accounts.register(db, body)
    return ApiResponse(message="User registered successfully", data=_auth_data(user, token))


@router.post("/login", response_model=ApiResponse[AuthData])
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthData]:
    """
    Authenticate with email and password; returns the account and a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    user, token = accounts.authenticate(db, body.email, body.password)
    return ApiResponse(message="Login successful", data=_auth_data(user, token))


@router.get("/me", response_model=ApiResponse[UserProfile])
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[UserProfile]:
    return ApiResponse(data=UserProfile.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[UserProfile])
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserProfile]:
    """Update name, phone and bio; omitted fields keep their current value."""
    user = accounts.update_profile(db, current_user.id, body)
    return ApiResponse(
        message="Profile updated successfully",
        data=UserProfile.model_validate(user),
    )
