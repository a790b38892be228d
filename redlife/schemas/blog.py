"""
RedLife Backend - Blog Schemas
==============================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from redlife.models.blog import BlogStatus
from redlife.schemas.common import APIModel


class BlogCreate(APIModel):
    """Body of POST /blogs. New blogs are always drafts."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    thumbnail: Optional[str] = Field(default=None, max_length=2048)


class BlogStatusUpdate(APIModel):
    status: BlogStatus


class BlogOut(APIModel):
    id: str = Field(alias="_id")
    title: Optional[str] = None
    content: Optional[str] = None
    thumbnail: Optional[str] = None
    status: BlogStatus = BlogStatus.DRAFT
    created_at: Optional[datetime] = None
