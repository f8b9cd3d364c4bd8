# blogsite/storage/database.py

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from blogsite import models, schemas
from blogsite.db.base_class import Base
from blogsite.db.session import create_engine_for_url, create_session_factory
from blogsite.storage.errors import (
    DuplicateEmailError,
    DuplicatePostTagError,
    DuplicateSlugError,
    DuplicateUsernameError,
    DuplicateWaitlistEmailError,
    NotFoundError,
    ReferenceViolationError,
    StorageError,
    StorageUnavailableError,
)
from blogsite.storage.interface import check_page

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)


def _snapshot(schema: Type[S], row) -> Optional[S]:
    if row is None:
        return None
    return schema.model_validate(row, from_attributes=True)


def _snapshots(schema: Type[S], rows) -> List[S]:
    return [schema.model_validate(row, from_attributes=True) for row in rows]


def _newest_posts_first(query):
    return query.order_by(
        models.Post.published_at.desc().nulls_last(),
        models.Post.id.desc(),
    )


def _page(query, limit: Optional[int], offset: int):
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query


def guarded(method):
    """Bound a storage coroutine by the operation timeout and normalise failures.

    Named storage errors pass through untouched; timeouts and anything the
    database driver raises turn into ``StorageUnavailableError``.
    Cancellation is left alone.
    """

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        name = method.__name__
        try:
            return await asyncio.wait_for(method(self, *args, **kwargs), self.operation_timeout)
        except (StorageError, ValueError):
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Storage operation {name} timed out after {self.operation_timeout}s")
            raise StorageUnavailableError(f"{name} timed out") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Storage operation {name} failed: {str(e)}", exc_info=True)
            raise StorageUnavailableError(f"{name} failed: storage unavailable") from e

    return wrapper


class PersistentStorage:
    """Relational storage backed by SQLAlchemy's asyncio extension.

    Every public operation opens its own ``AsyncSession`` and transaction,
    so a pooled connection is held only for the duration of that call.
    Uniqueness and references are checked inside the transaction; a
    concurrent writer that slips past the check is caught by the table
    constraints and reported with the same error classes.
    """

    def __init__(
        self,
        database_url: str = None,
        engine: AsyncEngine = None,
        create_tables: bool = True,
        operation_timeout: float = 10.0,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        if engine is None:
            if not database_url:
                raise ValueError("PersistentStorage needs a database_url or an engine")
            engine = create_engine_for_url(
                database_url, pool_size=pool_size, max_overflow=max_overflow, echo=echo
            )
        self.engine = engine
        self.create_tables = create_tables
        self.operation_timeout = operation_timeout
        self._session_factory = create_session_factory(engine)

    async def open(self) -> None:
        try:
            async with self.engine.begin() as conn:
                if self.create_tables:
                    await conn.run_sync(Base.metadata.create_all)
                    logger.info("Database tables created")
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Could not open database storage: {str(e)}", exc_info=True)
            raise StorageUnavailableError("database is unreachable") from e
        logger.info(f"Using persistent storage at {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")

    @guarded
    async def ping(self) -> bool:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    async def _missing_reference(self, *references) -> ReferenceViolationError:
        """Name the first of ``(entity, model, key)`` that has no row.

        Used after a foreign key failure, in a fresh session since the
        failed transaction is gone.
        """
        async with self._session_factory() as session:
            for entity, model, key in references:
                if await session.get(model, key) is None:
                    return ReferenceViolationError(entity, key)
        entity, _, key = references[0]
        return ReferenceViolationError(entity, key)

    # Users

    @guarded
    async def get_user(self, user_id: int) -> Optional[schemas.User]:
        async with self._session_factory() as session:
            row = await session.get(models.User, user_id)
            return _snapshot(schemas.User, row)

    @guarded
    async def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        async with self._session_factory() as session:
            row = await session.scalar(select(models.User).where(models.User.username == username))
            return _snapshot(schemas.User, row)

    @guarded
    async def get_user_by_email(self, email: str) -> Optional[schemas.User]:
        async with self._session_factory() as session:
            row = await session.scalar(select(models.User).where(models.User.email == email))
            return _snapshot(schemas.User, row)

    @guarded
    async def create_user(self, user: schemas.UserCreate) -> schemas.User:
        try:
            async with self._transaction() as session:
                if await session.scalar(select(models.User.id).where(models.User.username == user.username)):
                    raise DuplicateUsernameError(user.username)
                if await session.scalar(select(models.User.id).where(models.User.email == user.email)):
                    raise DuplicateEmailError(user.email)
                db_user = models.User(**user.model_dump(), is_admin=False)
                session.add(db_user)
                await session.flush()
                created = _snapshot(schemas.User, db_user)
        except IntegrityError as e:
            logger.error(f"IntegrityError occurred: {str(e.orig)}")
            if "username" in str(e.orig):
                raise DuplicateUsernameError(user.username) from e
            raise DuplicateEmailError(user.email) from e
        except (DuplicateUsernameError, DuplicateEmailError) as e:
            logger.warning(f"User creation rejected: {e}")
            raise
        logger.info(f"User created successfully. ID: {created.id}")
        return created

    # Categories

    @guarded
    async def get_categories(self) -> List[schemas.Category]:
        async with self._session_factory() as session:
            rows = await session.scalars(select(models.Category).order_by(models.Category.id))
            return _snapshots(schemas.Category, rows)

    @guarded
    async def get_category_by_slug(self, slug: str) -> Optional[schemas.Category]:
        async with self._session_factory() as session:
            row = await session.scalar(select(models.Category).where(models.Category.slug == slug))
            return _snapshot(schemas.Category, row)

    @guarded
    async def create_category(self, category: schemas.CategoryCreate) -> schemas.Category:
        try:
            async with self._transaction() as session:
                if await session.scalar(select(models.Category.id).where(models.Category.slug == category.slug)):
                    raise DuplicateSlugError("category", category.slug)
                db_category = models.Category(**category.model_dump())
                session.add(db_category)
                await session.flush()
                created = _snapshot(schemas.Category, db_category)
        except IntegrityError as e:
            raise DuplicateSlugError("category", category.slug) from e
        logger.info(f"Category created successfully. ID: {created.id}")
        return created

    # Tags

    @guarded
    async def get_tags(self) -> List[schemas.Tag]:
        async with self._session_factory() as session:
            rows = await session.scalars(select(models.Tag).order_by(models.Tag.id))
            return _snapshots(schemas.Tag, rows)

    @guarded
    async def get_tag_by_slug(self, slug: str) -> Optional[schemas.Tag]:
        async with self._session_factory() as session:
            row = await session.scalar(select(models.Tag).where(models.Tag.slug == slug))
            return _snapshot(schemas.Tag, row)

    @guarded
    async def create_tag(self, tag: schemas.TagCreate) -> schemas.Tag:
        try:
            async with self._transaction() as session:
                if await session.scalar(select(models.Tag.id).where(models.Tag.slug == tag.slug)):
                    raise DuplicateSlugError("tag", tag.slug)
                db_tag = models.Tag(**tag.model_dump())
                session.add(db_tag)
                await session.flush()
                created = _snapshot(schemas.Tag, db_tag)
        except IntegrityError as e:
            raise DuplicateSlugError("tag", tag.slug) from e
        logger.info(f"Tag created successfully. ID: {created.id}")
        return created

    # Posts

    @guarded
    async def get_posts(self, limit: Optional[int] = None, offset: int = 0) -> List[schemas.Post]:
        check_page(limit, offset)
        query = _page(_newest_posts_first(select(models.Post)), limit, offset)
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.Post, rows)

    @guarded
    async def get_post_by_slug(self, slug: str) -> Optional[schemas.Post]:
        async with self._session_factory() as session:
            row = await session.scalar(select(models.Post).where(models.Post.slug == slug))
            return _snapshot(schemas.Post, row)

    @guarded
    async def get_posts_by_category(
        self, category_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]:
        check_page(limit, offset)
        query = select(models.Post).where(models.Post.category_id == category_id)
        query = _page(_newest_posts_first(query), limit, offset)
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.Post, rows)

    @guarded
    async def get_posts_by_tag(
        self, tag_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Post]:
        check_page(limit, offset)
        tagged = select(models.PostTag.post_id).where(models.PostTag.tag_id == tag_id)
        query = select(models.Post).where(models.Post.id.in_(tagged))
        query = _page(_newest_posts_first(query), limit, offset)
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.Post, rows)

    @guarded
    async def get_featured_posts(self, limit: Optional[int] = None) -> List[schemas.Post]:
        check_page(limit, 0)
        query = select(models.Post).where(models.Post.is_featured.is_(True))
        query = _page(_newest_posts_first(query), limit, 0)
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.Post, rows)

    @guarded
    async def create_post(self, post: schemas.PostCreate) -> schemas.Post:
        try:
            async with self._transaction() as session:
                if await session.get(models.User, post.author_id) is None:
                    raise ReferenceViolationError("author", post.author_id)
                if await session.get(models.Category, post.category_id) is None:
                    raise ReferenceViolationError("category", post.category_id)
                if await session.scalar(select(models.Post.id).where(models.Post.slug == post.slug)):
                    raise DuplicateSlugError("post", post.slug)

                data = post.model_dump()
                data.update(
                    views=0,
                    published_at=post.published_at or datetime.now(timezone.utc),
                    is_featured=bool(post.is_featured),
                    meta_tags=post.meta_tags or {},
                )
                db_post = models.Post(**data)
                session.add(db_post)
                await session.flush()
                created = _snapshot(schemas.Post, db_post)
        except ReferenceViolationError as e:
            logger.warning(f"Post creation rejected: {e}")
            raise
        except IntegrityError as e:
            logger.error(f"IntegrityError occurred: {str(e.orig)}")
            if "FOREIGN KEY" in str(e.orig).upper():
                raise await self._missing_reference(
                    ("author", models.User, post.author_id),
                    ("category", models.Category, post.category_id),
                ) from e
            raise DuplicateSlugError("post", post.slug) from e
        logger.info(f"Post created successfully. ID: {created.id}")
        return created

    @guarded
    async def update_post_views(self, post_id: int) -> schemas.Post:
        async with self._transaction() as session:
            result = await session.execute(
                update(models.Post)
                .where(models.Post.id == post_id)
                .values(views=models.Post.views + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError("post", post_id)
            row = await session.scalar(
                select(models.Post)
                .where(models.Post.id == post_id)
                .execution_options(populate_existing=True)
            )
            return _snapshot(schemas.Post, row)

    # Post tags

    @guarded
    async def get_post_tags(self, post_id: int) -> List[schemas.PostTag]:
        query = select(models.PostTag).where(models.PostTag.post_id == post_id).order_by(models.PostTag.id)
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.PostTag, rows)

    @guarded
    async def add_tag_to_post(self, post_id: int, tag_id: int) -> schemas.PostTag:
        try:
            async with self._transaction() as session:
                if await session.get(models.Post, post_id) is None:
                    raise ReferenceViolationError("post", post_id)
                if await session.get(models.Tag, tag_id) is None:
                    raise ReferenceViolationError("tag", tag_id)
                existing = await session.scalar(
                    select(models.PostTag.id).where(
                        models.PostTag.post_id == post_id,
                        models.PostTag.tag_id == tag_id,
                    )
                )
                if existing:
                    raise DuplicatePostTagError(post_id, tag_id)
                db_post_tag = models.PostTag(post_id=post_id, tag_id=tag_id)
                session.add(db_post_tag)
                await session.flush()
                created = _snapshot(schemas.PostTag, db_post_tag)
        except IntegrityError as e:
            logger.error(f"IntegrityError occurred: {str(e.orig)}")
            if "FOREIGN KEY" in str(e.orig).upper():
                raise await self._missing_reference(
                    ("post", models.Post, post_id),
                    ("tag", models.Tag, tag_id),
                ) from e
            raise DuplicatePostTagError(post_id, tag_id) from e
        logger.info(f"Tag {tag_id} attached to post {post_id}")
        return created

    # Comments

    @guarded
    async def get_comments_by_post(self, post_id: int) -> List[schemas.Comment]:
        query = (
            select(models.Comment)
            .where(models.Comment.post_id == post_id)
            .order_by(models.Comment.created_at.desc(), models.Comment.id.desc())
        )
        async with self._session_factory() as session:
            rows = await session.scalars(query)
            return _snapshots(schemas.Comment, rows)

    @guarded
    async def create_comment(self, comment: schemas.CommentCreate) -> schemas.Comment:
        try:
            async with self._transaction() as session:
                if await session.get(models.User, comment.author_id) is None:
                    raise ReferenceViolationError("author", comment.author_id)
                if await session.get(models.Post, comment.post_id) is None:
                    raise ReferenceViolationError("post", comment.post_id)
                db_comment = models.Comment(**comment.model_dump(), created_at=datetime.now(timezone.utc))
                session.add(db_comment)
                await session.flush()
                created = _snapshot(schemas.Comment, db_comment)
        except IntegrityError as e:
            raise await self._missing_reference(
                ("author", models.User, comment.author_id),
                ("post", models.Post, comment.post_id),
            ) from e
        logger.info(f"Comment created successfully. ID: {created.id}")
        return created

    # Waitlist

    @guarded
    async def add_to_waitlist(self, entry: schemas.WaitlistCreate) -> schemas.Waitlist:
        try:
            async with self._transaction() as session:
                existing = await session.scalar(
                    select(models.WaitlistEntry.id).where(models.WaitlistEntry.email == entry.email)
                )
                if existing:
                    raise DuplicateWaitlistEmailError(entry.email)
                db_entry = models.WaitlistEntry(**entry.model_dump(), created_at=datetime.now(timezone.utc))
                session.add(db_entry)
                await session.flush()
                created = _snapshot(schemas.Waitlist, db_entry)
        except IntegrityError as e:
            logger.warning(f"IntegrityError occurred: {str(e.orig)}")
            raise DuplicateWaitlistEmailError(entry.email) from e
        except DuplicateWaitlistEmailError:
            logger.warning(f"Email already on the waitlist: {entry.email}")
            raise
        logger.info(f"Waitlist entry created successfully. ID: {created.id}")
        return created
