"""Tests for comment request and response schemas."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.comments.models import Comment, Like, create_comment
from src.comments.schemas import (
    CommentResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from src.main import validation_error_items


class TestCreateCommentRequest:
    def test_strips_text(self):
        request = CreateCommentRequest(text="  hi  ", post=str(uuid4()))
        assert request.text == "hi"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_rejected(self, text):
        with pytest.raises(ValidationError, match="Text is required"):
            CreateCommentRequest(text=text, post=str(uuid4()))

    def test_blank_post_rejected(self):
        with pytest.raises(ValidationError, match="Post is required"):
            CreateCommentRequest(text="hi", post=" ")


def test_update_request_rejects_blank_text():
    with pytest.raises(ValidationError, match="Text is required"):
        UpdateCommentRequest(text="  ")


def test_comment_response_field_names():
    user_id = uuid4()
    comment = create_comment(post_id=uuid4(), user_id=user_id, text="hi", name="Ann")
    comment.likes.append(Like(user=user_id))

    data = CommentResponse.from_comment(comment).model_dump(mode="json")

    assert set(data) == {"id", "text", "user", "post", "name", "avatar", "likes", "date"}
    assert data["likes"] == [{"user": str(user_id)}]
    assert data["avatar"] is None


def test_comment_ownership_and_likes():
    owner, other = uuid4(), uuid4()
    comment = Comment(
        comment_id=uuid4(),
        post_id=uuid4(),
        user_id=owner,
        text="hi",
        name="Ann",
        avatar=None,
        likes=[Like(user=other)],
        date=datetime.now(UTC),
    )

    assert comment.is_owned_by(owner)
    assert not comment.is_owned_by(other)
    assert comment.is_liked_by(other)
    assert not comment.is_liked_by(owner)
    assert comment.like_user_ids() == [other]


class TestValidationErrorItems:
    """Tests for the 400 body builder."""

    def test_missing_field_reads_as_required(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateCommentRequest(text="hi")
        errors = [
            {**err, "loc": ("body", *err["loc"])} for err in exc_info.value.errors()
        ]

        items = validation_error_items(errors)

        assert items == [
            {"msg": "Post is required", "param": "post", "location": "body", "value": None}
        ]

    def test_value_error_message_unwrapped(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateCommentRequest(text=" ", post="p")
        errors = [
            {**err, "loc": ("body", *err["loc"])} for err in exc_info.value.errors()
        ]

        items = validation_error_items(errors)

        assert items[0]["msg"] == "Text is required"
        assert items[0]["value"] == " "

    def test_sensitive_values_dropped(self):
        errors = [
            {
                "type": "string_too_short",
                "loc": ("body", "password"),
                "msg": "String should have at least 6 characters",
                "input": "abc",
            },
            {
                "type": "string_type",
                "loc": ("body", "api_token"),
                "msg": "Input should be a valid string",
                "input": 12345,
            },
        ]

        items = validation_error_items(errors)

        assert [item["value"] for item in items] == [None, None]
        assert [item["param"] for item in items] == ["password", "api_token"]
