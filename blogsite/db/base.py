# Import all the models so that Base.metadata knows every table
# before create_all() or alembic autogenerate runs.

from blogsite.db.base_class import Base
from blogsite.models.user import User
from blogsite.models.category import Category
from blogsite.models.tag import Tag
from blogsite.models.post import Post, PostTag
from blogsite.models.comment import Comment
from blogsite.models.waitlist import WaitlistEntry

__all__ = ["Base", "User", "Category", "Tag", "Post", "PostTag", "Comment", "WaitlistEntry"]
