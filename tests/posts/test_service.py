"""Tests for PostService."""

from datetime import UTC
from uuid import uuid4

import pytest

from src.auth.models import User
from src.posts.service import PostService
from tests.factories import post_row, result_of


@pytest.fixture
def post_service(mock_session):
    return PostService(session=mock_session, keyspace="test_keyspace")


@pytest.mark.asyncio
async def test_create_post_copies_author(post_service, mock_session):
    author = User(email="ann@example.com", name="Ann", password_hash="x", avatar_url="a.png")

    post = await post_service.create_post("first post", author)

    assert post.user_id == author.id
    assert post.name == "Ann"
    assert post.avatar == "a.png"
    assert post.comments == []
    params = mock_session.aexecute.await_args.args[1]
    assert params[0] == post.post_id
    assert params[5] == []


@pytest.mark.asyncio
async def test_get_post(post_service, mock_session):
    post_id, user_id, comment_id = uuid4(), uuid4(), uuid4()
    mock_session.aexecute.return_value = result_of(
        post_row(post_id, user_id, comments=[comment_id])
    )

    post = await post_service.get_post(post_id)

    assert post.post_id == post_id
    assert post.comments == [comment_id]
    assert post.date.tzinfo is UTC


@pytest.mark.asyncio
async def test_get_post_missing(post_service, mock_session):
    mock_session.aexecute.return_value = result_of()

    assert await post_service.get_post(uuid4()) is None


@pytest.mark.asyncio
async def test_get_post_without_comments(post_service, mock_session):
    post_id = uuid4()
    mock_session.aexecute.return_value = result_of(post_row(post_id, uuid4()))

    post = await post_service.get_post(post_id)

    assert post.comments == []
