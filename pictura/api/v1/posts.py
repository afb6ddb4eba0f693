"""Posts endpoints: public feed, image upload, likes, comments, reports and deletion."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from pictura.api.v1.auth import get_current_user, get_optional_user
from pictura.core.config import get_settings
from pictura.core.database import get_db
from pictura.models import User
from pictura.schemas.common import ApiResponse, PaginatedResponse, Pagination
from pictura.schemas.posts import (
    CommentOut,
    CommentRequest,
    LikeResult,
    PostAuthor,
    PostOut,
    ReportRequest,
)
from pictura.services import posts as post_service
from pictura.services.images import remove_post_image, save_post_image

router = APIRouter()

DEFAULT_FEED_LIMIT = 10


def _viewer_id(user: User | None) -> int | None:
    return user.id if user is not None else None


@router.get("", response_model=PaginatedResponse[PostOut])
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = DEFAULT_FEED_LIMIT,
) -> PaginatedResponse[PostOut]:
    """Active, unblocked posts, newest first. liked_by_me is filled when a valid token is sent."""
    page, limit = post_service.normalize_paging(page, limit, DEFAULT_FEED_LIMIT)
    posts, total = post_service.list_posts(db, page, limit)
    return PaginatedResponse(
        data=[PostOut.from_post(p, _viewer_id(viewer)) for p in posts],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[PostOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    image: Annotated[UploadFile | None, File()] = None,
    content: Annotated[str | None, Form()] = None,
) -> ApiResponse[PostOut]:
    """Create a post from a multipart form with an `image` file and optional `content`."""
    content = post_service.clean_content(content)
    settings = get_settings()
    filename, url = await save_post_image(image, settings)
    try:
        post = post_service.create_post(
            db,
            current_user,
            image=filename,
            image_url=url,
            content=content,
        )
    except Exception:
        remove_post_image(filename, settings)
        raise
    return ApiResponse(
        message="Post created successfully",
        data=PostOut.from_post(post, current_user.id),
    )


@router.get("/user/{user_id}", response_model=ApiResponse[list[PostOut]])
def list_user_posts(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
) -> ApiResponse[list[PostOut]]:
    posts = post_service.list_user_posts(db, user_id)
    return ApiResponse(data=[PostOut.from_post(p, _viewer_id(viewer)) for p in posts])


@router.get("/{post_id}", response_model=ApiResponse[PostOut])
def get_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    viewer: Annotated[User | None, Depends(get_optional_user)],
) -> ApiResponse[PostOut]:
    post = post_service.get_visible_post(db, post_id)
    return ApiResponse(data=PostOut.from_post(post, _viewer_id(viewer)))


@router.put("/{post_id}/like", response_model=ApiResponse[LikeResult])
def toggle_like(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[LikeResult]:
    post, liked = post_service.toggle_like(db, post_id, current_user)
    likers = [PostAuthor.model_validate(like.user) for like in post.likes]
    return ApiResponse(
        message="Like added" if liked else "Like removed",
        data=LikeResult(liked=liked, likes=likers, likes_count=len(likers)),
    )


@router.post(
    "/{post_id}/comment",
    response_model=ApiResponse[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    post_id: int,
    body: CommentRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[CommentOut]:
    comment = post_service.add_comment(db, post_id, current_user, body.text)
    return ApiResponse(message="Comment added", data=CommentOut.from_comment(comment))


@router.post("/{post_id}/report", response_model=ApiResponse[None])
def report_post(
    post_id: int,
    body: ReportRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[None]:
    post_service.report_post(db, post_id, current_user, body.reason)
    return ApiResponse(message="Post reported successfully")


@router.delete("/{post_id}", response_model=ApiResponse[None])
def delete_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[None]:
    """Delete a post. Allowed to its owner and to administrators."""
    post_service.delete_post(db, post_id, current_user)
    return ApiResponse(message="Post deleted successfully")
