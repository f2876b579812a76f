"""Post service layer."""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from src.auth.models import User

from .models import Post


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


class PostService:
    """Create and read posts."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._insert_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts
            (post_id, user_id, text, name, avatar, comments, date)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)
        self._get_post = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.posts WHERE post_id = ?"
        )

    async def create_post(self, text: str, author: User) -> Post:
        """Create a post with the author's name and avatar copied onto it."""
        post = Post(
            user_id=author.id,
            text=text,
            name=author.name,
            avatar=author.avatar_url,
        )
        await self.session.aexecute(
            self._insert_post,
            [
                post.post_id,
                post.user_id,
                post.text,
                post.name,
                post.avatar,
                post.comments,
                post.date,
            ],
        )
        logger.info("post_created", post_id=str(post.post_id))
        return post

    async def get_post(self, post_id: UUID) -> Post | None:
        """Find post by ID."""
        result = await self.session.aexecute(self._get_post, [post_id])
        row = result.one()
        return Post.from_row(row) if row else None
