"""Posts that comments attach to.

Only creation and lookup are offered; the comment service maintains each
post's list of comment ids.
"""

from .models import POSTS_TABLES_CQL, Post
from .service import PostService


__all__ = [
    "POSTS_TABLES_CQL",
    "Post",
    "PostService",
]
