"""
RedLife Backend - Blog Route Handlers
=====================================

What:  Blog creation, public listings, and the publish/unpublish switch.
Who:   Public blog page (published only) and the volunteer/admin content manager.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from redlife.dependencies import get_blog_service
from redlife.models.blog import BlogStatus
from redlife.schemas.blog import BlogCreate, BlogOut, BlogStatusUpdate
from redlife.schemas.common import (
    CountResponse,
    DeleteResult,
    ErrorResponse,
    InsertResult,
    UpdateResult,
)
from redlife.security import admin_user, blog_editor
from redlife.services.blog_service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blogs"])

AUTH_ERRORS = {
    401: {"description": "Missing or rejected bearer token", "model": ErrorResponse},
    403: {"description": "Caller lacks the required role", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "No such blog", "model": ErrorResponse}}


def _status_value(status: Optional[BlogStatus]) -> Optional[str]:
    return status.value if status else None


@router.post("/blogs", response_model=InsertResult, summary="Create a draft blog")
async def create_blog(
    payload: BlogCreate,
    service: BlogService = Depends(get_blog_service),
) -> InsertResult:
    return await service.create(payload)


@router.get(
    "/blogs",
    response_model=List[BlogOut],
    responses=AUTH_ERRORS,
    dependencies=[Depends(blog_editor)],
    summary="List blogs for the content manager",
)
async def list_blogs(
    status: Optional[BlogStatus] = None,
    service: BlogService = Depends(get_blog_service),
) -> List[BlogOut]:
    return await service.list_blogs(status=_status_value(status))


@router.get("/all-blogs", response_model=List[BlogOut])
async def list_all_blogs(
    status: Optional[BlogStatus] = None,
    sort: Optional[str] = Query(default=None, description="`asc` or `desc` by createdAt"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=0, ge=0, description="0 means no limit"),
    service: BlogService = Depends(get_blog_service),
) -> List[BlogOut]:
    return await service.list_all(
        status=_status_value(status), sort=sort, skip=skip, limit=limit
    )


@router.get("/all-blogs-count", response_model=CountResponse)
async def count_blogs(
    status: Optional[BlogStatus] = None,
    service: BlogService = Depends(get_blog_service),
) -> CountResponse:
    return await service.count(status=_status_value(status))


@router.get("/blogs-published", response_model=List[BlogOut])
async def list_published_blogs(
    service: BlogService = Depends(get_blog_service),
) -> List[BlogOut]:
    return await service.list_published()


@router.get("/blogs/{blog_id}", response_model=BlogOut, responses=NOT_FOUND)
async def get_blog(
    blog_id: str,
    service: BlogService = Depends(get_blog_service),
) -> BlogOut:
    return await service.get(blog_id)


@router.patch(
    "/blogs/{blog_id}",
    response_model=UpdateResult,
    responses={
        **AUTH_ERRORS,
        **NOT_FOUND,
        409: {"description": "Transition not allowed", "model": ErrorResponse},
    },
    dependencies=[Depends(blog_editor)],
    summary="Publish or unpublish a blog",
)
async def update_blog_status(
    blog_id: str,
    payload: BlogStatusUpdate,
    service: BlogService = Depends(get_blog_service),
) -> UpdateResult:
    return await service.update_status(blog_id, payload)


@router.delete(
    "/blog/{blog_id}",
    response_model=DeleteResult,
    responses={**AUTH_ERRORS, **NOT_FOUND},
    dependencies=[Depends(admin_user)],
    summary="Delete a blog (admin)",
)
async def delete_blog(
    blog_id: str,
    service: BlogService = Depends(get_blog_service),
) -> DeleteResult:
    return await service.delete(blog_id)
