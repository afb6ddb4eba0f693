"""SQLAlchemy ORM models."""

from pictura.models.base import Base
from pictura.models.post import Post, PostComment, PostLike, PostReport
from pictura.models.user import User

__all__ = ["Base", "Post", "PostComment", "PostLike", "PostReport", "User"]
