"""Post API endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.auth.dependencies import AuthServiceDep, CurrentUser

from .dependencies import PostServiceDep
from .schemas import CreatePostRequest, PostResponse


router = APIRouter(prefix="/api/posts", tags=["posts"])


def _parse_post_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
        ) from e


@router.post("", response_model=PostResponse, summary="Create post")
async def create_post(
    data: CreatePostRequest,
    post_service: PostServiceDep,
    auth_service: AuthServiceDep,
    user: CurrentUser,
) -> PostResponse:
    """Create a post authored by the current user."""
    author = await auth_service.get_user_by_id(user.id)
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    post = await post_service.create_post(data.text, author)
    return PostResponse.from_post(post)


@router.get("/{post_id}", response_model=PostResponse, summary="Get post")
async def get_post(
    post_id: str,
    post_service: PostServiceDep,
    _user: CurrentUser,
) -> PostResponse:
    """Fetch a post and the ids of its comments."""
    post = await post_service.get_post(_parse_post_id(post_id))
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
        )
    return PostResponse.from_post(post)
