"""Tests for CommentService against a mocked Cassandra session."""

from datetime import UTC, datetime
from unittest.mock import Mock, patch
from uuid import UUID, uuid4

import pytest

from src.comments.models import Like
from src.comments.service import (
    AlreadyLikedError,
    CommentNotFoundError,
    CommentService,
    NotAuthorizedError,
    PostNotFoundError,
    UserNotFoundError,
)
from tests.factories import comment_row, post_row, result_of, user_row


@pytest.fixture
def comment_service(mock_session):
    """CommentService whose prepared statements are distinguishable mocks."""
    mock_session.prepare = Mock(side_effect=lambda cql: Mock(name="stmt", cql=cql))
    return CommentService(session=mock_session, keyspace="test_keyspace")


@pytest.fixture
def batch_cls():
    with patch("src.comments.service.BatchStatement") as batch_cls:
        yield batch_cls


@pytest.fixture
def post_id() -> UUID:
    return uuid4()


def executed(mock_session) -> list:
    return [c.args[0] for c in mock_session.aexecute.await_args_list]


class TestCreateComment:
    """Tests for create_comment."""

    @pytest.mark.asyncio
    async def test_copies_author_details(
        self, comment_service, mock_session, batch_cls, actor_id, post_id
    ):
        """Ann (a.png) comments "hi" on a post."""
        mock_session.aexecute.side_effect = [
            result_of(user_row(actor_id, name="Ann", avatar_url="a.png")),
            result_of(post_row(post_id, actor_id)),
            Mock(),
        ]

        comment = await comment_service.create_comment("hi", post_id, actor_id)

        assert comment.text == "hi"
        assert comment.user_id == actor_id
        assert comment.post_id == post_id
        assert comment.name == "Ann"
        assert comment.avatar == "a.png"
        assert comment.likes == []
        assert comment.date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_insert_and_post_append_share_one_batch(
        self, comment_service, mock_session, batch_cls, actor_id, post_id
    ):
        mock_session.aexecute.side_effect = [
            result_of(user_row(actor_id)),
            result_of(post_row(post_id, actor_id)),
            Mock(),
        ]

        comment = await comment_service.create_comment("hi", post_id, actor_id)

        batch = batch_cls.return_value
        added = [c.args for c in batch.add.call_args_list]
        assert [stmt for stmt, _ in added] == [
            comment_service._insert_comment,
            comment_service._append_post_comment,
        ]
        assert added[1][1] == [[comment.comment_id], post_id]
        assert executed(mock_session)[-1] is batch

    @pytest.mark.asyncio
    async def test_unknown_post(
        self, comment_service, mock_session, batch_cls, actor_id, post_id
    ):
        mock_session.aexecute.side_effect = [
            result_of(user_row(actor_id)),
            result_of(),
        ]

        with pytest.raises(PostNotFoundError) as exc_info:
            await comment_service.create_comment("hi", post_id, actor_id)

        assert exc_info.value.message == "Post not found"
        batch_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_actor(
        self, comment_service, mock_session, batch_cls, actor_id, post_id
    ):
        mock_session.aexecute.side_effect = [result_of()]

        with pytest.raises(UserNotFoundError):
            await comment_service.create_comment("hi", post_id, actor_id)

        batch_cls.assert_not_called()


class TestListComments:
    """Tests for list_comments."""

    @pytest.mark.asyncio
    async def test_sorted_newest_first(self, comment_service, mock_session, actor_id):
        old = comment_row(actor_id, text="old", date=datetime(2024, 1, 1))
        new = comment_row(actor_id, text="new", date=datetime(2024, 3, 1))
        mid = comment_row(actor_id, text="mid", date=datetime(2024, 2, 1))
        mock_session.aexecute.return_value = result_of(old, new, mid)

        comments = await comment_service.list_comments(actor_id)

        assert [c.text for c in comments] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_ties_keep_scan_order(self, comment_service, mock_session, actor_id):
        same = datetime(2024, 1, 1, tzinfo=UTC)
        rows = [comment_row(actor_id, text=t, date=same) for t in ("a", "b", "c")]
        mock_session.aexecute.return_value = result_of(*rows)

        comments = await comment_service.list_comments(actor_id)

        assert [c.text for c in comments] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_empty(self, comment_service, mock_session, actor_id):
        mock_session.aexecute.return_value = result_of()

        assert await comment_service.list_comments(actor_id) == []


class TestGetComment:
    """Tests for get_comment."""

    @pytest.mark.asyncio
    async def test_found(self, comment_service, mock_session, actor_id):
        row = comment_row(actor_id, likes=[actor_id])
        mock_session.aexecute.return_value = result_of(row)

        comment = await comment_service.get_comment(row.comment_id, actor_id)

        assert comment.comment_id == row.comment_id
        assert comment.likes == [Like(user=actor_id)]

    @pytest.mark.asyncio
    async def test_not_found(self, comment_service, mock_session, actor_id):
        mock_session.aexecute.return_value = result_of()

        with pytest.raises(CommentNotFoundError):
            await comment_service.get_comment(uuid4(), actor_id)


class TestUpdateComment:
    """Tests for update_comment."""

    @pytest.mark.asyncio
    async def test_owner_can_edit(self, comment_service, mock_session, actor_id):
        row = comment_row(actor_id, text="hi")
        mock_session.aexecute.side_effect = [result_of(row), Mock()]

        comment = await comment_service.update_comment(row.comment_id, "edited", actor_id)

        assert comment.text == "edited"
        update = mock_session.aexecute.await_args_list[-1]
        assert update.args == (comment_service._update_text, ["edited", row.comment_id])

    @pytest.mark.asyncio
    async def test_other_user_rejected(self, comment_service, mock_session, actor_id):
        row = comment_row(uuid4(), text="hi")
        mock_session.aexecute.return_value = result_of(row)

        with pytest.raises(NotAuthorizedError) as exc_info:
            await comment_service.update_comment(row.comment_id, "edited", actor_id)

        assert exc_info.value.message == "Not authorized"
        assert comment_service._update_text not in executed(mock_session)

    @pytest.mark.asyncio
    async def test_not_found(self, comment_service, mock_session, actor_id):
        mock_session.aexecute.return_value = result_of()

        with pytest.raises(CommentNotFoundError):
            await comment_service.update_comment(uuid4(), "edited", actor_id)

    @pytest.mark.asyncio
    async def test_deleted_before_write(self, comment_service, mock_session, actor_id):
        """The conditional update is not applied when the row vanished."""
        row = comment_row(actor_id, text="hi")
        mock_session.aexecute.side_effect = [result_of(row), Mock(was_applied=False)]

        with pytest.raises(CommentNotFoundError):
            await comment_service.update_comment(row.comment_id, "edited", actor_id)

        assert "IF EXISTS" in comment_service._update_text.cql


class TestDeleteComment:
    """Tests for delete_comment."""

    @pytest.mark.asyncio
    async def test_owner_deletes_and_post_list_shrinks(
        self, comment_service, mock_session, batch_cls, actor_id, post_id
    ):
        row = comment_row(actor_id, post_id=post_id)
        mock_session.aexecute.side_effect = [result_of(row), Mock()]

        await comment_service.delete_comment(row.comment_id, actor_id)

        added = [c.args for c in batch_cls.return_value.add.call_args_list]
        assert added == [
            (comment_service._delete_comment, [row.comment_id]),
            (comment_service._remove_post_comment, [[row.comment_id], post_id]),
        ]

    @pytest.mark.asyncio
    async def test_other_user_rejected(
        self, comment_service, mock_session, batch_cls, actor_id
    ):
        row = comment_row(uuid4())
        mock_session.aexecute.return_value = result_of(row)

        with pytest.raises(NotAuthorizedError):
            await comment_service.delete_comment(row.comment_id, actor_id)

        batch_cls.assert_not_called()
        assert mock_session.aexecute.await_count == 1

    @pytest.mark.asyncio
    async def test_not_found(self, comment_service, mock_session, batch_cls, actor_id):
        mock_session.aexecute.return_value = result_of()

        with pytest.raises(CommentNotFoundError):
            await comment_service.delete_comment(uuid4(), actor_id)

        batch_cls.assert_not_called()


class TestLikeComment:
    """Tests for like_comment."""

    @pytest.mark.asyncio
    async def test_first_then_second_like(self, comment_service, mock_session, actor_id):
        """First like lands, the same user's second like is rejected."""
        comment_id = uuid4()
        mock_session.aexecute.side_effect = [
            result_of(comment_row(actor_id, comment_id=comment_id, likes=None)),
            Mock(),
        ]

        likes = await comment_service.like_comment(comment_id, actor_id)

        assert likes == [Like(user=actor_id)]
        assert mock_session.aexecute.await_args_list[-1].args == (
            comment_service._prepend_like,
            [[actor_id], comment_id],
        )

        mock_session.aexecute.reset_mock()
        mock_session.aexecute.side_effect = [
            result_of(comment_row(actor_id, comment_id=comment_id, likes=[actor_id])),
        ]

        with pytest.raises(AlreadyLikedError) as exc_info:
            await comment_service.like_comment(comment_id, actor_id)

        assert exc_info.value.message == "Comment already liked"
        assert mock_session.aexecute.await_count == 1

    @pytest.mark.asyncio
    async def test_newest_like_first(self, comment_service, mock_session, actor_id):
        earlier = uuid4()
        row = comment_row(uuid4(), likes=[earlier])
        mock_session.aexecute.side_effect = [result_of(row), Mock()]

        likes = await comment_service.like_comment(row.comment_id, actor_id)

        assert [like.user for like in likes] == [actor_id, earlier]

    @pytest.mark.asyncio
    async def test_not_found(self, comment_service, mock_session, actor_id):
        mock_session.aexecute.return_value = result_of()

        with pytest.raises(CommentNotFoundError):
            await comment_service.like_comment(uuid4(), actor_id)

    @pytest.mark.asyncio
    async def test_deleted_before_write(self, comment_service, mock_session, actor_id):
        """A like racing a delete must not recreate the row."""
        row = comment_row(uuid4(), likes=None)
        mock_session.aexecute.side_effect = [result_of(row), Mock(was_applied=False)]

        with pytest.raises(CommentNotFoundError):
            await comment_service.like_comment(row.comment_id, actor_id)

        assert "IF EXISTS" in comment_service._prepend_like.cql
