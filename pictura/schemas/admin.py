"""Request/response schemas for the moderation panel (admin only)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pictura.models import Post, PostReport


class StatsOut(BaseModel):
    total_users: int
    total_posts: int
    active_users: int
    blocked_users: int
    blocked_posts: int
    recent_posts: int = Field(description="Posts created in the last 7 days")
    new_users: int = Field(description="Accounts created in the last 7 days")


class BlockRequest(BaseModel):
    """
    Block or unblock a user or post.

    When blocked is omitted the current state is toggled, matching the
    moderation panel's single block/unblock button.
    """

    blocked: bool | None = None
    reason: str | None = None


PostStatusFilter = Literal["all", "active", "blocked"]


class AdminAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class ReportOut(BaseModel):
    id: int
    user: AdminAuthor
    reason: str
    created_at: datetime | None = None

    @classmethod
    def from_report(cls, report: PostReport) -> "ReportOut":
        return cls(
            id=report.id,
            user=AdminAuthor.model_validate(report.user),
            reason=report.reason,
            created_at=report.created_at,
        )


class AdminPostOut(BaseModel):
    """Post as seen by moderators, including hidden state and reports."""

    id: int
    user: AdminAuthor
    content: str
    image: str
    image_url: str
    is_active: bool
    is_blocked: bool
    block_reason: str
    likes_count: int
    comments_count: int
    reports: list[ReportOut] = Field(default_factory=list)
    reports_count: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_post(cls, post: Post) -> "AdminPostOut":
        reports = [ReportOut.from_report(r) for r in post.reports]
        return cls(
            id=post.id,
            user=AdminAuthor.model_validate(post.user),
            content=post.content or "",
            image=post.image,
            image_url=post.image_url or "",
            is_active=post.is_active,
            is_blocked=post.is_blocked,
            block_reason=post.block_reason or "",
            likes_count=len(post.likes),
            comments_count=len(post.comments),
            reports=reports,
            reports_count=len(reports),
            created_at=post.created_at,
        )

