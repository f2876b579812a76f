"""Pydantic schemas for posts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import Post


class CreatePostRequest(BaseModel):
    """Request to create a post."""

    text: str = Field(..., max_length=10000)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Text is required"
            raise ValueError(msg)
        return v


class PostResponse(BaseModel):
    """A post with the ids of its comments."""

    id: UUID
    user: UUID
    text: str
    name: str
    avatar: str | None = None
    comments: list[UUID] = Field(default_factory=list)
    date: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.post_id,
            user=post.user_id,
            text=post.text,
            name=post.name,
            avatar=post.avatar,
            comments=post.comments,
            date=post.date,
        )
