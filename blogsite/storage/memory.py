# blogsite/storage/memory.py

import asyncio
import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, TypeVar

from blogsite import schemas
from blogsite.storage.errors import (
    DuplicateEmailError,
    DuplicatePostTagError,
    DuplicateSlugError,
    DuplicateUsernameError,
    DuplicateWaitlistEmailError,
    NotFoundError,
    ReferenceViolationError,
)
from blogsite.storage.interface import check_page

logger = logging.getLogger(__name__)

T = TypeVar("T")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def post_sort_key(post: schemas.Post):
    # Newest first once reversed; undated posts sink to the end, ties by id.
    published = post.published_at
    return (published is not None, published or _OLDEST, post.id)


def paginate(items: List[T], limit: Optional[int] = None, offset: int = 0) -> List[T]:
    if offset:
        items = items[offset:]
    if limit is not None:
        items = items[:limit]
    return items


class VolatileStorage:
    """Process-local storage kept in dictionaries.

    Nothing survives a restart, which makes it the natural choice for
    tests and local development.  All mutations run under a single
    ``asyncio.Lock`` so that check-then-insert and the views counter stay
    atomic with respect to other coroutines.  Rows are held as pydantic
    models and every read hands out a deep copy.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._users: Dict[int, schemas.User] = {}
        self._categories: Dict[int, schemas.Category] = {}
        self._tags: Dict[int, schemas.Tag] = {}
        self._posts: Dict[int, schemas.Post] = {}
        self._post_tags: Dict[int, schemas.PostTag] = {}
        self._comments: Dict[int, schemas.Comment] = {}
        self._waitlist: Dict[int, schemas.Waitlist] = {}

        self._user_ids = itertools.count(1)
        self._category_ids = itertools.count(1)
        self._tag_ids = itertools.count(1)
        self._post_ids = itertools.count(1)
        self._post_tag_ids = itertools.count(1)
        self._comment_ids = itertools.count(1)
        self._waitlist_ids = itertools.count(1)

    async def open(self) -> None:
        logger.info("Using volatile in-memory storage")

    async def close(self) -> None:
        logger.info("Volatile storage closed")

    async def ping(self) -> bool:
        return True

    @staticmethod
    def _copy(item: Optional[T]) -> Optional[T]:
        return item.model_copy(deep=True) if item is not None else None

    @classmethod
    def _copy_all(cls, items: Iterable[T]) -> List[T]:
        return [cls._copy(item) for item in items]

    @staticmethod
    def _find(rows: Dict[int, T], **criteria) -> Optional[T]:
        for row in rows.values():
            if all(getattr(row, key) == value for key, value in criteria.items()):
                return row
        return None

    # Users

    async def get_user(self, user_id: int) -> Optional[schemas.User]:
        return self._copy(self._users.get(user_id))

    async def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        return self._copy(self._find(self._users, username=username))

    async def get_user_by_email(self, email: str) -> Optional[schemas.User]:
        return self._copy(self._find(self._users, email=email))

    async def create_user(self, user: schemas.UserCreate) -> schemas.User:
        async with self._lock:
            if self._find(self._users, username=user.username):
                logger.warning(f"Username already taken: {user.username}")
                raise DuplicateUsernameError(user.username)
            if self._find(self._users, email=user.email):
                logger.warning(f"Email already registered: {user.email}")
                raise DuplicateEmailError(user.email)
            new_user = schemas.User(id=next(self._user_ids), is_admin=False, **user.model_dump())
            self._users[new_user.id] = new_user
        logger.info(f"User created successfully. ID: {new_user.id}")
        return self._copy(new_user)

    # Categories

    async def get_categories(self) -> List[schemas.Category]:
        return self._copy_all(self._categories.values())

    async def get_category_by_slug(self, slug: str) -> Optional[schemas.Category]:
        return self._copy(self._find(self._categories, slug=slug))

    async def create_category(self, category: schemas.CategoryCreate) -> schemas.Category:
        async with self._lock:
            if self._find(self._categories, slug=category.slug):
                raise DuplicateSlugError("category", category.slug)
            new_category = schemas.Category(id=next(self._category_ids), **category.model_dump())
            self._categories[new_category.id] = new_category
        logger.info(f"Category created successfully. ID: {new_category.id}")
        return self._copy(new_category)

    # Tags

    async def get_tags(self) -> List[schemas.Tag]:
        return self._copy_all(self._tags.values())

    async def get_tag_by_slug(self, slug: str) -> Optional[schemas.Tag]:
        return self._copy(self._find(self._tags, slug=slug))

    async def create_tag(self, tag: schemas.TagCreate) -> schemas.Tag:
        async with self._lock:
            if self._find(self._tags, slug=tag.slug):
                raise DuplicateSlugError("tag", tag.slug)
            new_tag = schemas.Tag(id=next(self._tag_ids), **tag.model_dump())
            self._tags[new_tag.id] = new_tag
        logger.info(f"Tag created successfully. ID: {new_tag.id}")
        return self._copy(new_tag)

    # Posts

    def _sorted_posts(self, posts: Iterable[schemas.Post]) -> List[schemas.Post]:
        return sorted(posts, key=post_sort_key, reverse=True)

    async def get_posts(self, limit: Optional[int] = None, offset: int = 0) -> List[schemas.Post]:
        check_page(limit, offset)
        posts = self._sorted_posts(self._posts.values())
        return self._copy_all(paginate(posts, limit, offset))

    async def get_post_by_slug(self, slug: str) -> Optional[schemas.Post]:
        return self._copy(self._find(self._posts, slug=slug))

    async def get_posts_by_category(
        self, category_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]:
        check_page(limit, offset)
        posts = self._sorted_posts(p for p in self._posts.values() if p.category_id == category_id)
        return self._copy_all(paginate(posts, limit, offset))

    async def get_posts_by_tag(
        self, tag_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]:
        check_page(limit, offset)
        post_ids = {pt.post_id for pt in self._post_tags.values() if pt.tag_id == tag_id}
        posts = self._sorted_posts(p for p in self._posts.values() if p.id in post_ids)
        return self._copy_all(paginate(posts, limit, offset))

    async def get_featured_posts(self, limit: Optional[int] = None) -> List[schemas.Post]:
        check_page(limit, 0)
        posts = self._sorted_posts(p for p in self._posts.values() if p.is_featured)
        return self._copy_all(paginate(posts, limit))

    async def create_post(self, post: schemas.PostCreate) -> schemas.Post:
        async with self._lock:
            if post.author_id not in self._users:
                logger.warning(f"Post author {post.author_id} does not exist")
                raise ReferenceViolationError("author", post.author_id)
            if post.category_id not in self._categories:
                logger.warning(f"Post category {post.category_id} does not exist")
                raise ReferenceViolationError("category", post.category_id)
            if self._find(self._posts, slug=post.slug):
                raise DuplicateSlugError("post", post.slug)

            data = post.model_dump()
            data.update(
                id=next(self._post_ids),
                views=0,
                published_at=post.published_at or datetime.now(timezone.utc),
                is_featured=bool(post.is_featured),
                meta_tags=post.meta_tags or {},
            )
            new_post = schemas.Post(**data)
            self._posts[new_post.id] = new_post
        logger.info(f"Post created successfully. ID: {new_post.id}")
        return self._copy(new_post)

    async def update_post_views(self, post_id: int) -> schemas.Post:
        async with self._lock:
            post = self._posts.get(post_id)
            if post is None:
                raise NotFoundError("post", post_id)
            updated = post.model_copy(update={"views": post.views + 1})
            self._posts[post_id] = updated
        return self._copy(updated)

    # Post tags

    async def get_post_tags(self, post_id: int) -> List[schemas.PostTag]:
        return self._copy_all(pt for pt in self._post_tags.values() if pt.post_id == post_id)

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> schemas.PostTag:
        async with self._lock:
            if post_id not in self._posts:
                raise ReferenceViolationError("post", post_id)
            if tag_id not in self._tags:
                raise ReferenceViolationError("tag", tag_id)
            if self._find(self._post_tags, post_id=post_id, tag_id=tag_id):
                raise DuplicatePostTagError(post_id, tag_id)
            post_tag = schemas.PostTag(id=next(self._post_tag_ids), post_id=post_id, tag_id=tag_id)
            self._post_tags[post_tag.id] = post_tag
        logger.info(f"Tag {tag_id} attached to post {post_id}")
        return self._copy(post_tag)

    # Comments

    async def get_comments_by_post(self, post_id: int) -> List[schemas.Comment]:
        comments = sorted(
            (c for c in self._comments.values() if c.post_id == post_id),
            key=lambda c: (c.created_at, c.id),
            reverse=True,
        )
        return self._copy_all(comments)

    async def create_comment(self, comment: schemas.CommentCreate) -> schemas.Comment:
        async with self._lock:
            if comment.author_id not in self._users:
                raise ReferenceViolationError("author", comment.author_id)
            if comment.post_id not in self._posts:
                raise ReferenceViolationError("post", comment.post_id)
            new_comment = schemas.Comment(
                id=next(self._comment_ids),
                created_at=datetime.now(timezone.utc),
                **comment.model_dump(),
            )
            self._comments[new_comment.id] = new_comment
        logger.info(f"Comment created successfully. ID: {new_comment.id}")
        return self._copy(new_comment)

    # Waitlist

    async def add_to_waitlist(self, entry: schemas.WaitlistCreate) -> schemas.Waitlist:
        async with self._lock:
            if self._find(self._waitlist, email=entry.email):
                logger.warning(f"Email already on the waitlist: {entry.email}")
                raise DuplicateWaitlistEmailError(entry.email)
            new_entry = schemas.Waitlist(
                id=next(self._waitlist_ids),
                created_at=datetime.now(timezone.utc),
                **entry.model_dump(),
            )
            self._waitlist[new_entry.id] = new_entry
        logger.info(f"Waitlist entry created successfully. ID: {new_entry.id}")
        return self._copy(new_entry)
