"""Pydantic request/response schemas."""

from pictura.schemas.admin import AdminPostOut, BlockRequest, StatsOut
from pictura.schemas.auth import (
    AuthData,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserProfile,
)
from pictura.schemas.common import ApiResponse, ErrorResponse, PaginatedResponse, Pagination
from pictura.schemas.health import HealthResponse
from pictura.schemas.posts import CommentOut, LikeResult, PostAuthor, PostOut

__all__ = [
    "AdminPostOut",
    "ApiResponse",
    "AuthData",
    "BlockRequest",
    "CommentOut",
    "ErrorResponse",
    "HealthResponse",
    "LikeResult",
    "LoginRequest",
    "PaginatedResponse",
    "Pagination",
    "PostAuthor",
    "PostOut",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "StatsOut",
    "UserProfile",
]
