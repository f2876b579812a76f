"""Row and result builders for mocked Cassandra sessions."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import UUID, uuid4


def result_of(*rows) -> MagicMock:
    """Mock ResultSet: `one()` gives the first row, iteration gives all."""
    result = MagicMock()
    result.one.return_value = rows[0] if rows else None
    result.__iter__.return_value = iter(rows)
    return result


def user_row(user_id: UUID, name: str = "Ann", avatar_url: str | None = "a.png"):
    return SimpleNamespace(
        id=user_id,
        email="ann@example.com",
        name=name,
        avatar_url=avatar_url,
        password_hash="$argon2id$hash",
        is_active=True,
        created_at=datetime(2024, 1, 1),
        updated_at=None,
    )


def post_row(post_id: UUID, user_id: UUID, comments: list[UUID] | None = None):
    return SimpleNamespace(
        post_id=post_id,
        user_id=user_id,
        text="first post",
        name="Ann",
        avatar="a.png",
        comments=comments,
        date=datetime(2024, 1, 1),
    )


def comment_row(
    user_id: UUID,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
    text: str = "hi",
    likes: list[UUID] | None = None,
    date: datetime | None = None,
):
    return SimpleNamespace(
        comment_id=comment_id or uuid4(),
        post_id=post_id or uuid4(),
        user_id=user_id,
        text=text,
        name="Ann",
        avatar="a.png",
        likes=likes,
        date=date or datetime(2024, 1, 1, tzinfo=UTC),
    )
