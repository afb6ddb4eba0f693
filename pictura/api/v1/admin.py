"""Moderation panel endpoints. Every route requires an authenticated admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pictura.api.v1.auth import require_admin
from pictura.core.database import get_db
from pictura.models import User
from pictura.schemas.admin import AdminPostOut, BlockRequest, PostStatusFilter, StatsOut
from pictura.schemas.auth import UserProfile
from pictura.schemas.common import ApiResponse, PaginatedResponse, Pagination
from pictura.services import accounts, moderation
from pictura.services.posts import normalize_paging

router = APIRouter()

DEFAULT_ADMIN_LIMIT = 20


@router.get("/stats", response_model=ApiResponse[StatsOut])
def get_stats(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StatsOut]:
    return ApiResponse(data=moderation.get_stats(db))


@router.get("/users", response_model=PaginatedResponse[UserProfile])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_ADMIN_LIMIT,
    search: Annotated[str | None, Query()] = None,
) -> PaginatedResponse[UserProfile]:
    """List accounts (no password hashes), optionally searching name and email."""
    page, limit = normalize_paging(page, limit, DEFAULT_ADMIN_LIMIT)
    users, total = moderation.list_users(db, page, limit, search)
    return PaginatedResponse(
        data=[UserProfile.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/posts", response_model=PaginatedResponse[AdminPostOut])
def list_posts(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_ADMIN_LIMIT,
    status: Annotated[PostStatusFilter, Query()] = "all",
) -> PaginatedResponse[AdminPostOut]:
    page, limit = normalize_paging(page, limit, DEFAULT_ADMIN_LIMIT)
    posts, total = moderation.list_posts(db, page, limit, status)
    return PaginatedResponse(
        data=[AdminPostOut.from_post(p) for p in posts],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/reports", response_model=PaginatedResponse[AdminPostOut])
def list_reported_posts(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_ADMIN_LIMIT,
) -> PaginatedResponse[AdminPostOut]:
    page, limit = normalize_paging(page, limit, DEFAULT_ADMIN_LIMIT)
    posts, total = moderation.list_reported_posts(db, page, limit)
    return PaginatedResponse(
        data=[AdminPostOut.from_post(p) for p in posts],
        pagination=Pagination.build(page, limit, total),
    )


@router.put("/users/{user_id}/block", response_model=ApiResponse[UserProfile])
def block_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    body: BlockRequest | None = None,
) -> ApiResponse[UserProfile]:
    """
    Block or unblock an account. Send {"blocked": true|false} to set the state,
    or omit it to toggle. Admins cannot block themselves.
    """
    body = body or BlockRequest()
    if body.blocked is None:
        user = accounts.toggle_block(db, admin, user_id, body.reason)
    else:
        user = accounts.set_blocked(db, admin, user_id, body.blocked, body.reason)
    return ApiResponse(
        message="User blocked" if user.is_blocked else "User unblocked",
        data=UserProfile.model_validate(user),
    )


@router.put("/posts/{post_id}/block", response_model=ApiResponse[AdminPostOut])
def block_post(
    post_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    body: BlockRequest | None = None,
) -> ApiResponse[AdminPostOut]:
    body = body or BlockRequest()
    post = moderation.set_post_blocked(db, admin, post_id, body.blocked, body.reason)
    return ApiResponse(
        message="Post blocked" if post.is_blocked else "Post unblocked",
        data=AdminPostOut.from_post(post),
    )


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Delete an account and all of its posts. Admins cannot delete themselves."""
    accounts.delete_account(db, admin, user_id)
    return ApiResponse(message="User and their posts deleted successfully")


@router.delete("/posts/{post_id}", response_model=ApiResponse[None])
def delete_post(
    post_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    moderation.delete_post(db, admin, post_id)
    return ApiResponse(message="Post deleted successfully")
