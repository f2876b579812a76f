"""Database model for posts.

A post keeps an ordered list of the ids of comments created on it. The list
is appended to in the same batch that inserts the comment.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.auth.models import ensure_utc_aware


POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    post_id UUID PRIMARY KEY,
    user_id UUID,
    text TEXT,
    name TEXT,
    avatar TEXT,
    comments LIST<UUID>,
    date TIMESTAMP
)
"""

POSTS_TABLES_CQL = [
    POST_TABLE_CQL,
]


@dataclass
class Post:
    """Post entity."""

    user_id: UUID
    text: str
    name: str
    avatar: str | None = None
    comments: list[UUID] = field(default_factory=list)
    post_id: UUID = field(default_factory=uuid4)
    date: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_row(cls, row: Any) -> "Post":
        """Create Post from Cassandra row."""
        return cls(
            post_id=row.post_id,
            user_id=row.user_id,
            text=row.text,
            name=row.name or "",
            avatar=row.avatar,
            # Cassandra returns None for an empty list column
            comments=list(row.comments or []),
            date=ensure_utc_aware(row.date),
        )
