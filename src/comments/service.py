"""Comment service layer.

Business logic for creating, reading, editing, deleting and liking comments.
Every operation runs the same guard sequence: load the entity, fail with
not-found if it is missing, check ownership where the operation needs it,
then mutate.
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from cassandra.query import BatchStatement, BatchType

from src.auth.models import User

from .models import Comment, Like, create_comment


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CommentError(Exception):
    """Base comment error."""

    def __init__(self, message: str, code: str = "comment_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CommentNotFoundError(CommentError):
    """Comment not found."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message, "comment_not_found")


class NotAuthorizedError(CommentError):
    """Actor does not own the comment."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, "not_authorized")


class AlreadyLikedError(CommentError):
    """Actor already liked the comment."""

    def __init__(self, message: str = "Comment already liked"):
        super().__init__(message, "already_liked")


class PostNotFoundError(CommentError):
    """Target post does not exist."""

    def __init__(self, message: str = "Post not found"):
        super().__init__(message, "post_not_found")


class UserNotFoundError(CommentError):
    """Acting user has no account row."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, "user_not_found")


# ==============================================================================
# Comment Service
# ==============================================================================


class CommentService:
    """Service for comment management."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_comment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments
            (comment_id, post_id, user_id, text, name, avatar, likes, date)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
            WHERE comment_id = ?
        """)

        self._get_all_comments = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
        """)

        # Conditional writes so an edit or like never recreates a deleted row
        self._update_text = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments
            SET text = ?
            WHERE comment_id = ?
            IF EXISTS
        """)

        self._delete_comment = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments
            WHERE comment_id = ?
        """)

        # Prepend keeps likes most-recent-first
        self._prepend_like = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments
            SET likes = ? + likes
            WHERE comment_id = ?
            IF EXISTS
        """)

        # Post back-references
        self._get_post_exists = self.session.prepare(f"""
            SELECT post_id FROM {self.keyspace}.posts
            WHERE post_id = ?
        """)

        self._append_post_comment = self.session.prepare(f"""
            UPDATE {self.keyspace}.posts
            SET comments = comments + ?
            WHERE post_id = ?
        """)

        self._remove_post_comment = self.session.prepare(f"""
            UPDATE {self.keyspace}.posts
            SET comments = comments - ?
            WHERE post_id = ?
        """)

        # Author lookup for denormalized fields
        self._get_user = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.users
            WHERE id = ?
        """)

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def _find_comment(self, comment_id: UUID) -> Comment | None:
        result = await self.session.aexecute(self._get_comment, [comment_id])
        row = result.one()
        return Comment.from_row(row) if row else None

    async def _require_comment(self, comment_id: UUID) -> Comment:
        comment = await self._find_comment(comment_id)
        if comment is None:
            raise CommentNotFoundError
        return comment

    async def _require_owned_comment(self, comment_id: UUID, actor_id: UUID) -> Comment:
        comment = await self._require_comment(comment_id)
        if not comment.is_owned_by(actor_id):
            logger.warning(
                "comment_not_owner",
                comment_id=str(comment_id),
                owner_id=str(comment.user_id),
            )
            raise NotAuthorizedError
        return comment

    async def _get_author(self, actor_id: UUID) -> User:
        result = await self.session.aexecute(self._get_user, [actor_id])
        row = result.one()
        if row is None:
            raise UserNotFoundError
        return User.from_row(row)

    async def _post_exists(self, post_id: UUID) -> bool:
        result = await self.session.aexecute(self._get_post_exists, [post_id])
        return result.one() is not None

    # ==========================================================================
    # Operations
    # ==========================================================================

    async def create_comment(
        self,
        text: str,
        post_id: UUID,
        actor_id: UUID,
    ) -> Comment:
        """Create a comment on a post.

        Copies the actor's name and avatar onto the comment, then inserts it
        and appends its id to the post's comments list in one logged batch.

        Raises:
            UserNotFoundError: If the actor has no user row
            PostNotFoundError: If the post does not exist
        """
        author = await self._get_author(actor_id)

        if not await self._post_exists(post_id):
            raise PostNotFoundError

        comment = create_comment(
            post_id=post_id,
            user_id=actor_id,
            text=text,
            name=author.name,
            avatar=author.avatar_url,
        )

        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(
            self._insert_comment,
            [
                comment.comment_id,
                comment.post_id,
                comment.user_id,
                comment.text,
                comment.name,
                comment.avatar,
                comment.like_user_ids(),
                comment.date,
            ],
        )
        batch.add(self._append_post_comment, [[comment.comment_id], post_id])
        await self.session.aexecute(batch)

        logger.info(
            "comment_created",
            comment_id=str(comment.comment_id),
            post_id=str(post_id),
        )
        return comment

    async def list_comments(self, actor_id: UUID) -> list[Comment]:
        """Return every comment, newest first.

        Cassandra has no global order across partitions, so the full scan is
        sorted here. The sort is stable, so equal dates keep scan order.
        """
        result = await self.session.aexecute(self._get_all_comments)
        comments = [Comment.from_row(row) for row in result]
        comments.sort(key=lambda c: c.date, reverse=True)
        return comments

    async def get_comment(self, comment_id: UUID, actor_id: UUID) -> Comment:
        """Fetch one comment.

        Raises:
            CommentNotFoundError: If no comment has this id
        """
        return await self._require_comment(comment_id)

    async def update_comment(
        self,
        comment_id: UUID,
        text: str,
        actor_id: UUID,
    ) -> Comment:
        """Replace a comment's text. Only the author may do this.

        Raises:
            CommentNotFoundError: If no comment has this id, or it was deleted
                before the write
            NotAuthorizedError: If the actor is not the author
        """
        comment = await self._require_owned_comment(comment_id, actor_id)

        result = await self.session.aexecute(self._update_text, [text, comment_id])
        if not result.was_applied:
            raise CommentNotFoundError
        comment.text = text

        logger.info("comment_updated", comment_id=str(comment_id))
        return comment

    async def delete_comment(self, comment_id: UUID, actor_id: UUID) -> None:
        """Delete a comment and drop it from its post's comments list.

        Raises:
            CommentNotFoundError: If no comment has this id
            NotAuthorizedError: If the actor is not the author
        """
        comment = await self._require_owned_comment(comment_id, actor_id)

        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(self._delete_comment, [comment_id])
        batch.add(self._remove_post_comment, [[comment_id], comment.post_id])
        await self.session.aexecute(batch)

        logger.info(
            "comment_deleted",
            comment_id=str(comment_id),
            post_id=str(comment.post_id),
        )

    async def like_comment(self, comment_id: UUID, actor_id: UUID) -> list[Like]:
        """Add the actor to the front of a comment's likes.

        There is no unlike: a second like by the same user is rejected and
        leaves the list untouched.

        Returns:
            The updated likes, most recent first

        Raises:
            CommentNotFoundError: If no comment has this id, or it was deleted
                before the write
            AlreadyLikedError: If the actor already liked it
        """
        comment = await self._require_comment(comment_id)

        if comment.is_liked_by(actor_id):
            logger.info("comment_like_rejected", comment_id=str(comment_id))
            raise AlreadyLikedError

        # TODO: tighten the condition to IF likes = ? so the duplicate check is
        # atomic; two concurrent first likes by one user can currently both land
        result = await self.session.aexecute(
            self._prepend_like, [[actor_id], comment_id]
        )
        if not result.was_applied:
            raise CommentNotFoundError
        comment.likes.insert(0, Like(user=actor_id))

        logger.info(
            "comment_liked",
            comment_id=str(comment_id),
            like_count=len(comment.likes),
        )
        return comment.likes
