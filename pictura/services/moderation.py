"""Moderation panel queries and actions (callers must already be verified as admin)."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from pictura.models import Post, PostReport, User
from pictura.schemas.admin import PostStatusFilter, StatsOut
from pictura.services.accounts import DEFAULT_BLOCK_REASON
from pictura.services.guard import Identity
from pictura.services.posts import get_post

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 7


def get_stats(db: Session, now: datetime | None = None) -> StatsOut:
    """Counts for the dashboard; 'recent' means created within the last RECENT_WINDOW_DAYS."""
    since = (now or datetime.now(UTC)) - timedelta(days=RECENT_WINDOW_DAYS)
    return StatsOut(
        total_users=db.query(User).count(),
        total_posts=db.query(Post).count(),
        active_users=db.query(User)
        .filter(User.is_active.is_(True), User.is_blocked.is_(False))
        .count(),
        blocked_users=db.query(User).filter(User.is_blocked.is_(True)).count(),
        blocked_posts=db.query(Post).filter(Post.is_blocked.is_(True)).count(),
        recent_posts=db.query(Post).filter(Post.created_at >= since).count(),
        new_users=db.query(User).filter(User.created_at >= since).count(),
    )


def list_users(
    db: Session,
    page: int,
    limit: int,
    search: str | None = None,
) -> tuple[list[User], int]:
    """Accounts newest first, optionally filtered by a case-insensitive name/email substring."""
    query = db.query(User)
    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total


def list_posts(
    db: Session,
    page: int,
    limit: int,
    status: PostStatusFilter = "all",
) -> tuple[list[Post], int]:
    query = db.query(Post)
    if status == "blocked":
        query = query.filter(Post.is_blocked.is_(True))
    elif status == "active":
        query = query.filter(Post.is_blocked.is_(False), Post.is_active.is_(True))
    total = query.count()
    posts = (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return posts, total


def list_reported_posts(db: Session, page: int, limit: int) -> tuple[list[Post], int]:
    """Posts with at least one report, most reported first."""
    report_counts = (
        db.query(PostReport.post_id, func.count(PostReport.id).label("report_count"))
        .group_by(PostReport.post_id)
        .subquery()
    )
    query = db.query(Post).join(report_counts, report_counts.c.post_id == Post.id)
    total = query.count()
    posts = (
        query.order_by(report_counts.c.report_count.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return posts, total


def set_post_blocked(
    db: Session,
    actor: Identity,
    post_id: int,
    blocked: bool | None = None,
    reason: str | None = None,
) -> Post:
    """Block or unblock a post; blocked=None toggles the current state."""
    post = get_post(db, post_id)
    if blocked is None:
        blocked = not post.is_blocked
    post.is_blocked = blocked
    post.block_reason = ((reason or "").strip() or DEFAULT_BLOCK_REASON) if blocked else ""
    db.commit()
    db.refresh(post)
    logger.info(
        "Post id=%s %s by admin id=%s",
        post.id,
        "blocked" if post.is_blocked else "unblocked",
        actor.id,
    )
    return post


def delete_post(db: Session, actor: Identity, post_id: int) -> None:
    post = get_post(db, post_id)
    db.delete(post)
    db.commit()
    logger.info("Post id=%s deleted by admin id=%s", post_id, actor.id)
