# blogsite/storage/interface.py

from typing import List, Optional, Protocol, runtime_checkable

from blogsite import schemas


@runtime_checkable
class BlogStorage(Protocol):
    """Everything the HTTP layer may ask of a storage backend.

    Reads return detached pydantic snapshots; single-row lookups return
    ``None`` when nothing matches.  Post listings are ordered newest
    ``published_at`` first.
    """

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def ping(self) -> bool: ...

    # Users
    async def get_user(self, user_id: int) -> Optional[schemas.User]: ...

    async def get_user_by_username(self, username: str) -> Optional[schemas.User]: ...

    async def get_user_by_email(self, email: str) -> Optional[schemas.User]: ...

    async def create_user(self, user: schemas.UserCreate) -> schemas.User: ...

    # Categories
    async def get_categories(self) -> List[schemas.Category]: ...

    async def get_category_by_slug(self, slug: str) -> Optional[schemas.Category]: ...

    async def create_category(self, category: schemas.CategoryCreate) -> schemas.Category: ...

    # Tags
    async def get_tags(self) -> List[schemas.Tag]: ...

    async def get_tag_by_slug(self, slug: str) -> Optional[schemas.Tag]: ...

    async def create_tag(self, tag: schemas.TagCreate) -> schemas.Tag: ...

    # Posts
    async def get_posts(self, limit: Optional[int] = None, offset: int = 0) -> List[schemas.Post]: ...

    async def get_post_by_slug(self, slug: str) -> Optional[schemas.Post]: ...

    async def get_posts_by_category(
        self, category_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]: ...

    async def get_posts_by_tag(
        self, tag_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]: ...

    async def get_featured_posts(self, limit: Optional[int] = None) -> List[schemas.Post]: ...

    async def create_post(self, post: schemas.PostCreate) -> schemas.Post: ...

    async def update_post_views(self, post_id: int) -> schemas.Post: ...

    # Post tags
    async def get_post_tags(self, post_id: int) -> List[schemas.PostTag]: ...

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> schemas.PostTag: ...

    # Comments
    async def get_comments_by_post(self, post_id: int) -> List[schemas.Comment]: ...

    async def create_comment(self, comment: schemas.CommentCreate) -> schemas.Comment: ...

    # Waitlist
    async def add_to_waitlist(self, entry: schemas.WaitlistCreate) -> schemas.Waitlist: ...


def check_page(limit: Optional[int], offset: int) -> None:
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative")
    if offset is None or offset < 0:
        raise ValueError("offset must not be negative")
