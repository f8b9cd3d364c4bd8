from .user import User, UserCreate, UserPublic
from .category import Category, CategoryCreate
from .tag import Tag, TagCreate
from .post import Post, PostCreate, PostTag, PostTagAttach, PostTagCreate
from .comment import Comment, CommentCreate
from .waitlist import Waitlist, WaitlistCreate

__all__ = [
    "User", "UserCreate", "UserPublic",
    "Category", "CategoryCreate",
    "Tag", "TagCreate",
    "Post", "PostCreate", "PostTag", "PostTagAttach", "PostTagCreate",
    "Comment", "CommentCreate",
    "Waitlist", "WaitlistCreate",
]
