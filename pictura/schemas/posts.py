"""Request/response schemas for posts, likes, comments and reports."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pictura.models import Post, PostComment


class PostAuthor(BaseModel):
    """Public view of an account attached to posts, likes and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: str


class CommentOut(BaseModel):
    id: int
    user: PostAuthor
    text: str
    created_at: datetime | None = None

    @classmethod
    def from_comment(cls, comment: PostComment) -> "CommentOut":
        return cls(
            id=comment.id,
            user=PostAuthor.model_validate(comment.user),
            text=comment.text,
            created_at=comment.created_at,
        )


class PostOut(BaseModel):
    """Post with its author, likes and comments resolved."""

    id: int
    user: PostAuthor
    content: str
    image: str
    image_url: str
    likes: list[PostAuthor] = Field(default_factory=list)
    likes_count: int = 0
    comments: list[CommentOut] = Field(default_factory=list)
    comments_count: int = 0
    liked_by_me: bool | None = Field(
        default=None,
        description="Whether the caller liked this post; null for anonymous requests",
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_post(cls, post: Post, viewer_id: int | None = None) -> "PostOut":
        likers = [PostAuthor.model_validate(like.user) for like in post.likes]
        comments = [CommentOut.from_comment(c) for c in post.comments]
        return cls(
            id=post.id,
            user=PostAuthor.model_validate(post.user),
            content=post.content or "",
            image=post.image,
            image_url=post.image_url or "",
            likes=likers,
            likes_count=len(likers),
            comments=comments,
            comments_count=len(comments),
            liked_by_me=(
                None if viewer_id is None else any(like.user_id == viewer_id for like in post.likes)
            ),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class LikeResult(BaseModel):
    liked: bool
    likes: list[PostAuthor]
    likes_count: int


class CommentRequest(BaseModel):
    text: str = ""


class ReportRequest(BaseModel):
    reason: str = ""
