"""
Posts: creation, public listing, likes, comments, reports and deletion.

Public reads only return posts that are active and not blocked. Deletion is allowed
to the post's owner and to administrators.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pictura.core.errors import NotFoundError, ValidationError
from pictura.models import Post, PostComment, PostLike, PostReport
from pictura.models.user import ROLE_ADMIN
from pictura.services.guard import Identity, require_owner_or_role

logger = logging.getLogger(__name__)

CONTENT_MAX_LEN = 1000
COMMENT_MAX_LEN = 500
REPORT_REASON_MAX_LEN = 500
MAX_PAGE_SIZE = 100
# Keeps (page - 1) * limit inside a 64-bit OFFSET; pages past it are empty anyway.
MAX_PAGE_NUMBER = 1_000_000


def normalize_paging(page: int | None, limit: int | None, default_limit: int) -> tuple[int, int]:
    """Clamp page to 1..MAX_PAGE_NUMBER and limit to 1..MAX_PAGE_SIZE, falling back to defaults."""
    page = min(page, MAX_PAGE_NUMBER) if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, MAX_PAGE_SIZE)


def _visible_posts(db: Session):
    return db.query(Post).filter(Post.is_active.is_(True), Post.is_blocked.is_(False))


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_visible_post(db: Session, post_id: int) -> Post:
    """Return the post, or NotFoundError if it is missing, inactive or blocked."""
    post = get_post(db, post_id)
    if not post.is_visible:
        raise NotFoundError("This post is not available")
    return post


def clean_content(content: str | None) -> str:
    """Trimmed post caption; ValidationError past CONTENT_MAX_LEN."""
    content = (content or "").strip()
    if len(content) > CONTENT_MAX_LEN:
        raise ValidationError(f"Content must be at most {CONTENT_MAX_LEN} characters")
    return content


def create_post(
    db: Session,
    author: Identity,
    image: str,
    image_url: str,
    content: str | None = None,
) -> Post:
    content = clean_content(content)
    if not image:
        raise ValidationError("An image is required")
    post = Post(user_id=author.id, content=content, image=image, image_url=image_url)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def list_posts(db: Session, page: int, limit: int) -> tuple[list[Post], int]:
    """Visible posts, newest first, with the total count for pagination."""
    query = _visible_posts(db)
    total = query.count()
    posts = (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return posts, total


def list_user_posts(db: Session, user_id: int) -> list[Post]:
    return (
        _visible_posts(db)
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def toggle_like(db: Session, post_id: int, user: Identity) -> tuple[Post, bool]:
    """
    Add the caller's like, or remove it if already present. Returns (post, liked).

    The delete is a single conditional statement and the insert relies on the unique
    (post, user) pair, so two concurrent toggles cannot leave a duplicate like.
    """
    post = get_visible_post(db, post_id)
    removed = (
        db.query(PostLike)
        .filter(PostLike.post_id == post.id, PostLike.user_id == user.id)
        .delete(synchronize_session=False)
    )
    liked = removed == 0
    if liked:
        db.add(PostLike(post_id=post.id, user_id=user.id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same like first.
        db.rollback()
        liked = True
    db.expire(post)
    return post, liked


def add_comment(db: Session, post_id: int, user: Identity, text: str | None) -> PostComment:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    if len(text) > COMMENT_MAX_LEN:
        raise ValidationError(f"Comment must be at most {COMMENT_MAX_LEN} characters")
    post = get_visible_post(db, post_id)
    comment = PostComment(post_id=post.id, user_id=user.id, text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def report_post(db: Session, post_id: int, user: Identity, reason: str | None) -> PostReport:
    """Record a moderation report; each user may report a given post once."""
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("You must provide a reason to report a post")
    if len(reason) > REPORT_REASON_MAX_LEN:
        raise ValidationError(f"Reason must be at most {REPORT_REASON_MAX_LEN} characters")
    post = get_post(db, post_id)
    already = (
        db.query(PostReport)
        .filter(PostReport.post_id == post.id, PostReport.user_id == user.id)
        .first()
    )
    if already is not None:
        raise ValidationError("You have already reported this post")
    report = PostReport(post_id=post.id, user_id=user.id, reason=reason)
    db.add(report)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("You have already reported this post") from e
    db.refresh(report)
    return report


def delete_post(db: Session, post_id: int, identity: Identity) -> None:
    """Delete a post if identity owns it or is an administrator; ForbiddenError otherwise."""
    post = get_post(db, post_id)
    owner_id = post.user_id
    require_owner_or_role(identity, owner_id, ROLE_ADMIN)
    db.delete(post)
    db.commit()
    if identity.id != owner_id:
        logger.info("Post id=%s deleted by admin id=%s", post_id, identity.id)
