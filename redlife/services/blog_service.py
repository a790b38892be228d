"""
RedLife Backend - Blog Service
==============================

What:  Blog creation, listing and publishing lifecycle.
Who:   Blog route handlers.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from redlife.exceptions import ConflictError, NotFoundError
from redlife.models.blog import BLOG_LIFECYCLE, BlogStatus
from redlife.repositories.base import build_filter, parse_object_id, sort_by
from redlife.repositories.blogs import BlogRepository
from redlife.schemas.blog import BlogCreate, BlogOut, BlogStatusUpdate
from redlife.schemas.common import CountResponse, DeleteResult, InsertResult, UpdateResult

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(self, blogs: BlogRepository):
        self.blogs = blogs

    async def create(self, payload: BlogCreate) -> InsertResult:
        document = payload.to_document()
        document["status"] = BLOG_LIFECYCLE.initial
        document["createdAt"] = datetime.now(timezone.utc)
        inserted_id = await self.blogs.insert(document)
        logger.info("Blog %s created as draft", inserted_id)
        return InsertResult(inserted_id=inserted_id)

    async def list_blogs(self, status: Optional[str] = None) -> List[BlogOut]:
        docs = await self.blogs.find(build_filter(status=status))
        return [BlogOut.model_validate(doc) for doc in docs]

    async def list_all(
        self,
        status: Optional[str] = None,
        sort: Optional[str] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[BlogOut]:
        docs = await self.blogs.find(
            build_filter(status=status),
            sort=sort_by("createdAt", sort),
            skip=skip,
            limit=limit,
        )
        return [BlogOut.model_validate(doc) for doc in docs]

    async def list_published(self) -> List[BlogOut]:
        return await self.list_blogs(status=BlogStatus.PUBLISHED.value)

    async def count(self, status: Optional[str] = None) -> CountResponse:
        return CountResponse(count=await self.blogs.count(build_filter(status=status)))

    async def get(self, blog_id: str) -> BlogOut:
        doc = await self.blogs.find_by_id(blog_id)
        if doc is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        return BlogOut.model_validate(doc)

    async def update_status(self, blog_id: str, payload: BlogStatusUpdate) -> UpdateResult:
        """Publish or unpublish; same-status updates are accepted without a write."""
        doc = await self.blogs.find_by_id(blog_id)
        if doc is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)

        stored_status = doc.get("status")
        current = stored_status or BLOG_LIFECYCLE.initial
        BLOG_LIFECYCLE.check(current, payload.status)
        if current == payload.status:
            return UpdateResult(matched_count=1, modified_count=0)

        outcome = await self.blogs.update_one(
            {"_id": parse_object_id(blog_id), "status": stored_status},
            {"status": payload.status},
        )
        if outcome.matched_count == 0:
            raise ConflictError(
                message="The blog changed while it was being updated",
                context={"resource_id": blog_id},
            )
        logger.info("Blog %s: %s → %s", blog_id, current, payload.status)
        return UpdateResult(
            matched_count=outcome.matched_count,
            modified_count=outcome.modified_count,
        )

    async def delete(self, blog_id: str) -> DeleteResult:
        deleted = await self.blogs.delete_by_id(blog_id)
        if deleted == 0:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        logger.info("Blog %s deleted", blog_id)
        return DeleteResult(deleted_count=deleted)
