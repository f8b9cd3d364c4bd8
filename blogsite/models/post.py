# blogsite/models/post.py

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from blogsite.db.base_class import Base


class Post(Base):
    """Model for blog posts"""
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    excerpt = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    cover_image = Column(String(1024))
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    published_at = Column(DateTime(timezone=True), index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    views = Column(Integer, nullable=False, default=0)
    seo_title = Column(String(255))
    seo_description = Column(Text)
    meta_tags = Column(JSON)

    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    tag_links = relationship("PostTag", back_populates="post")
    comments = relationship("Comment", back_populates="post")


class PostTag(Base):
    """Join row between a post and a tag"""
    __tablename__ = "post_tags"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tags.id"), nullable=False, index=True)

    post = relationship("Post", back_populates="tag_links")
    tag = relationship("Tag", back_populates="post_links")

    __table_args__ = (UniqueConstraint('post_id', 'tag_id', name='uq_post_tags_post_id_tag_id'),)
