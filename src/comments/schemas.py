"""Pydantic schemas for the comment endpoints.

Field names on the wire follow the feed client's conventions: `user` and
`post` for the two references, `date` for the creation time and `likes` as a
list of `{"user": id}` objects.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Comment, Like


# ==============================================================================
# Request Schemas
# ==============================================================================


def _require_text(value: str, message: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


class CreateCommentRequest(BaseModel):
    """Request to create a comment on a post."""

    text: str = Field(..., max_length=10000)
    post: str

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v, "Text is required")

    @field_validator("post")
    @classmethod
    def validate_post(cls, v: str) -> str:
        return _require_text(v, "Post is required")


class UpdateCommentRequest(BaseModel):
    """Request to replace a comment's text."""

    text: str = Field(..., max_length=10000)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v, "Text is required")


# ==============================================================================
# Response Schemas
# ==============================================================================


class LikeResponse(BaseModel):
    """One entry of a comment's likes list."""

    model_config = ConfigDict(from_attributes=True)

    user: UUID


class CommentResponse(BaseModel):
    """Response for a single comment."""

    id: UUID
    text: str
    user: UUID
    post: UUID
    name: str
    avatar: str | None = None
    likes: list[LikeResponse] = Field(default_factory=list)
    date: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        """Create response from Comment entity."""
        return cls(
            id=comment.comment_id,
            text=comment.text,
            user=comment.user_id,
            post=comment.post_id,
            name=comment.name,
            avatar=comment.avatar,
            likes=likes_response(comment.likes),
            date=comment.date,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    msg: str


class ValidationErrorItem(BaseModel):
    """One failing field in a 400 validation response."""

    msg: str
    param: str
    location: str
    value: Any = None


def likes_response(likes: list[Like]) -> list[LikeResponse]:
    return [LikeResponse(user=like.user) for like in likes]
