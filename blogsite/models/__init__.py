from blogsite.models.user import User
from blogsite.models.category import Category
from blogsite.models.tag import Tag
from blogsite.models.post import Post, PostTag
from blogsite.models.comment import Comment
from blogsite.models.waitlist import WaitlistEntry

__all__ = [
    "User",
    "Category",
    "Tag",
    "Post",
    "PostTag",
    "Comment",
    "WaitlistEntry",
]
