# blogsite/schemas/comment.py

from datetime import datetime

from pydantic import Field, PositiveInt

from .base import BlogModel


class CommentBase(BlogModel):
    content: str = Field(min_length=1)
    author_id: PositiveInt
    post_id: PositiveInt


class CommentCreate(CommentBase):
    pass


class Comment(CommentBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
