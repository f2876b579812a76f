"""Database model for comments.

One row per comment, keyed by comment_id. Author name and avatar are copied
from the user at creation time so reads never join against users.

The likes column holds user ids, most recent first. A user appears in it at
most once; the service checks before prepending.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.auth.models import ensure_utc_aware


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    comment_id UUID PRIMARY KEY,
    post_id UUID,
    user_id UUID,
    text TEXT,
    name TEXT,
    avatar TEXT,
    likes LIST<UUID>,
    date TIMESTAMP
)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Like:
    """A single like, identified by the user who gave it."""

    user: UUID


@dataclass
class Comment:
    """Comment on a post."""

    comment_id: UUID
    post_id: UUID
    user_id: UUID
    text: str
    name: str
    avatar: str | None
    likes: list[Like]
    date: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            user_id=row.user_id,
            text=row.text,
            name=row.name or "",
            avatar=row.avatar,
            # Cassandra returns None for an empty list column
            likes=[Like(user=user_id) for user_id in row.likes or []],
            date=ensure_utc_aware(row.date),
        )

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.user_id == user_id

    def is_liked_by(self, user_id: UUID) -> bool:
        return any(like.user == user_id for like in self.likes)

    def like_user_ids(self) -> list[UUID]:
        return [like.user for like in self.likes]


def create_comment(
    post_id: UUID,
    user_id: UUID,
    text: str,
    name: str,
    avatar: str | None = None,
) -> Comment:
    """Create a new comment with no likes, dated now."""
    return Comment(
        comment_id=uuid4(),
        post_id=post_id,
        user_id=user_id,
        text=text,
        name=name,
        avatar=avatar,
        likes=[],
        date=datetime.now(UTC),
    )
