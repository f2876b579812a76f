"""Comments on feed posts.

Create, list, read, edit, delete and like comments.

Note: Router is not exported here to avoid circular imports.
Import directly from src.comments.router when needed.
"""

from .models import COMMENTS_TABLES_CQL, Comment, Like
from .service import CommentService


__all__ = [
    "COMMENTS_TABLES_CQL",
    "Comment",
    "CommentService",
    "Like",
]
