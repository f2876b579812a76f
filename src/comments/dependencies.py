"""FastAPI dependencies for the comment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from .service import CommentError, CommentNotFoundError, CommentService


async def get_comment_service(request: Request) -> CommentService:
    """Get comment service from app state."""
    app_state = request.app.state
    if not hasattr(app_state, "comment_service") or not app_state.comment_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Comment service unavailable",
        )
    return app_state.comment_service


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


def parse_comment_id(comment_id: str) -> UUID:
    """Parse a path id. A malformed id names no comment."""
    try:
        return UUID(comment_id)
    except ValueError as e:
        raise CommentNotFoundError from e


def handle_comment_error(error: CommentError) -> HTTPException:
    """Convert comment errors to HTTP exceptions."""
    status_map = {
        "comment_not_found": status.HTTP_404_NOT_FOUND,
        "post_not_found": status.HTTP_404_NOT_FOUND,
        "user_not_found": status.HTTP_404_NOT_FOUND,
        "not_authorized": status.HTTP_401_UNAUTHORIZED,
        "already_liked": status.HTTP_400_BAD_REQUEST,
    }

    status_code = status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTTPException(
        status_code=status_code,
        detail=error.message,
    )
