"""Comment API endpoints.

Provides routes for:
- Comment CRUD (create, list, read, update, delete)
- Likes (one per user, no unlike)

Every route requires a bearer token. The acting user comes from the token,
never from the request body.
"""

from uuid import UUID

import structlog
from fastapi import APIRouter

from src.auth.dependencies import CurrentUser

from .dependencies import CommentServiceDep, handle_comment_error, parse_comment_id
from .schemas import (
    CommentResponse,
    CreateCommentRequest,
    LikeResponse,
    MessageResponse,
    UpdateCommentRequest,
    likes_response,
)
from .service import CommentError, PostNotFoundError


logger = structlog.get_logger(__name__)


router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post(
    "",
    response_model=CommentResponse,
    summary="Create comment",
)
async def create_comment(
    data: CreateCommentRequest,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Create a comment on a post as the current user."""
    try:
        try:
            post_id = UUID(data.post)
        except ValueError as e:
            raise PostNotFoundError from e

        comment = await comment_service.create_comment(
            text=data.text,
            post_id=post_id,
            actor_id=user.id,
        )
    except CommentError as e:
        raise handle_comment_error(e) from e

    return CommentResponse.from_comment(comment)


@router.get(
    "",
    response_model=list[CommentResponse],
    summary="List comments",
)
async def list_comments(
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> list[CommentResponse]:
    """All comments across all posts, newest first."""
    comments = await comment_service.list_comments(user.id)
    return [CommentResponse.from_comment(c) for c in comments]


@router.put(
    "/like/{comment_id}",
    response_model=list[LikeResponse],
    summary="Like comment",
)
async def like_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> list[LikeResponse]:
    """Like a comment. Returns its likes, most recent first."""
    try:
        likes = await comment_service.like_comment(parse_comment_id(comment_id), user.id)
    except CommentError as e:
        raise handle_comment_error(e) from e

    return likes_response(likes)


@router.get(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Get comment",
)
async def get_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Get a single comment."""
    try:
        comment = await comment_service.get_comment(parse_comment_id(comment_id), user.id)
    except CommentError as e:
        raise handle_comment_error(e) from e

    return CommentResponse.from_comment(comment)


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    summary="Update comment",
)
async def update_comment(
    comment_id: str,
    data: UpdateCommentRequest,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Replace the text of a comment. Only its author can edit it."""
    try:
        comment = await comment_service.update_comment(
            comment_id=parse_comment_id(comment_id),
            text=data.text,
            actor_id=user.id,
        )
    except CommentError as e:
        raise handle_comment_error(e) from e

    return CommentResponse.from_comment(comment)


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete comment",
)
async def delete_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Delete a comment. Only its author can delete it."""
    try:
        await comment_service.delete_comment(parse_comment_id(comment_id), user.id)
    except CommentError as e:
        raise handle_comment_error(e) from e

    return MessageResponse(msg="Comment removed")
