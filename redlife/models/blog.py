"""
RedLife Backend - Blog Domain Model
===================================

What:  Status values and lifecycle of a blog post.

Lifecycle:
    draft ◀──▶ published

Blogs are always created as drafts; a volunteer or admin publishes them
and may take them back to draft.
"""

from enum import Enum

from redlife.models.lifecycle import StatusLifecycle


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


BLOG_LIFECYCLE = StatusLifecycle(
    resource="blog",
    transitions={
        BlogStatus.DRAFT.value: {BlogStatus.PUBLISHED.value},
        BlogStatus.PUBLISHED.value: {BlogStatus.DRAFT.value},
    },
    initial=BlogStatus.DRAFT.value,
)
