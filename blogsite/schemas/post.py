# blogsite/schemas/post.py

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, PositiveInt

from .base import BlogModel


class PostBase(BlogModel):
    """Base schema for blog posts"""
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    excerpt: str = Field(min_length=1)
    content: str = Field(min_length=1)
    cover_image: Optional[str] = None
    author_id: PositiveInt
    category_id: PositiveInt
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class PostCreate(PostBase):
    """Schema for creating blog posts.

    ``published_at`` falls back to the creation time and ``is_featured``
    to False when left out.
    """
    published_at: Optional[datetime] = None
    is_featured: Optional[bool] = None
    meta_tags: Optional[Dict[str, Any]] = None


class Post(PostBase):
    """Schema for complete blog post representation"""
    id: int
    published_at: Optional[datetime] = None
    is_featured: bool = False
    views: int = 0
    meta_tags: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        from_attributes = True


class PostTagCreate(BlogModel):
    post_id: PositiveInt
    tag_id: PositiveInt


class PostTagAttach(BlogModel):
    """Request body for attaching a tag to a post given in the path"""
    tag_id: PositiveInt


class PostTag(PostTagCreate):
    id: int

    class Config:
        from_attributes = True
