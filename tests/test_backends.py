import asyncio
from datetime import datetime, timezone

import pytest

from blogsite import models, schemas
from blogsite.core.config import get_settings
from blogsite.storage import (
    BlogStorage,
    DuplicateWaitlistEmailError,
    PersistentStorage,
    ReferenceViolationError,
    StorageUnavailableError,
    VolatileStorage,
    create_storage,
    seed_default_data,
)
from blogsite.storage.database import guarded
from blogsite.storage.seed import DEFAULT_AUTHORS, DEFAULT_CATEGORIES, DEFAULT_TAGS

BASE_TIME = datetime(2024, 5, 1, tzinfo=timezone.utc)


async def run_fixed_sequence(storage):
    author = await storage.create_user(
        schemas.UserCreate(username="writer", password="pw", email="writer@blog.io")
    )
    category = await storage.create_category(schemas.CategoryCreate(name="Tech", slug="tech"))
    for hours, slug in ((1, "first"), (3, "third"), (2, "second")):
        await storage.create_post(
            schemas.PostCreate(
                title=slug.title(),
                slug=slug,
                excerpt="excerpt",
                content="content",
                author_id=author.id,
                category_id=category.id,
                published_at=BASE_TIME.replace(hour=hours),
                is_featured=hours % 2 == 1,
            )
        )
    return await storage.get_posts()


@pytest.mark.asyncio
async def test_backends_return_identical_posts(tmp_path):
    memory = VolatileStorage()
    database = PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'equivalence.db'}")
    await memory.open()
    await database.open()
    try:
        from_memory = await run_fixed_sequence(memory)
        from_database = await run_fixed_sequence(database)
    finally:
        await memory.close()
        await database.close()

    assert [p.slug for p in from_memory] == ["third", "second", "first"]
    assert [p.model_dump() for p in from_memory] == [p.model_dump() for p in from_database]


@pytest.mark.asyncio
async def test_persistent_data_survives_reopen(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'durable.db'}"
    storage = PersistentStorage(url)
    await storage.open()
    await storage.add_to_waitlist(schemas.WaitlistCreate(full_name="Ada", email="a@x.com"))
    await storage.close()

    reopened = PersistentStorage(url)
    await reopened.open()
    try:
        with pytest.raises(DuplicateWaitlistEmailError):
            await reopened.add_to_waitlist(schemas.WaitlistCreate(full_name="Ada", email="a@x.com"))
    finally:
        await reopened.close()


def test_both_backends_satisfy_the_protocol(tmp_path):
    assert isinstance(VolatileStorage(), BlogStorage)
    assert isinstance(PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}"), BlogStorage)


def test_create_storage_follows_settings(tmp_path):
    memory = create_storage(get_settings(STORAGE_BACKEND="memory"))
    database = create_storage(
        get_settings(
            STORAGE_BACKEND="database",
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}",
            STORAGE_TIMEOUT_SECONDS=2.5,
        )
    )

    assert isinstance(memory, VolatileStorage)
    assert isinstance(database, PersistentStorage)
    assert database.operation_timeout == 2.5


def test_persistent_storage_needs_a_target():
    with pytest.raises(ValueError):
        PersistentStorage()


@pytest.mark.asyncio
async def test_unreachable_database_on_open(tmp_path):
    storage = PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'blog.db'}")

    with pytest.raises(StorageUnavailableError):
        await storage.open()
    await storage.close()


@pytest.mark.asyncio
async def test_driver_failures_become_storage_unavailable(tmp_path):
    storage = PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'blog.db'}")
    try:
        with pytest.raises(StorageUnavailableError) as excinfo:
            await storage.get_user(1)
        assert excinfo.value.__cause__ is not None

        with pytest.raises(StorageUnavailableError):
            await storage.ping()
    finally:
        await storage.close()


class FakeBackend:
    operation_timeout = 0.05

    @guarded
    async def slow(self):
        await asyncio.sleep(5)

    @guarded
    async def broken(self):
        raise OSError("connection reset")

    @guarded
    async def rejected(self):
        raise ValueError("limit must not be negative")


@pytest.mark.asyncio
async def test_timeout_becomes_storage_unavailable():
    with pytest.raises(StorageUnavailableError):
        await FakeBackend().slow()


@pytest.mark.asyncio
async def test_io_errors_become_storage_unavailable():
    with pytest.raises(StorageUnavailableError):
        await FakeBackend().broken()


@pytest.mark.asyncio
async def test_caller_errors_pass_through():
    with pytest.raises(ValueError):
        await FakeBackend().rejected()


@pytest.mark.asyncio
async def test_seed_default_data(storage):
    assert await seed_default_data(storage) is True

    assert [c.slug for c in await storage.get_categories()] == [c.slug for c in DEFAULT_CATEGORIES]
    assert [t.slug for t in await storage.get_tags()] == [t.slug for t in DEFAULT_TAGS]
    for author in DEFAULT_AUTHORS:
        assert await storage.get_user_by_username(author.username) is not None


@pytest.mark.asyncio
async def test_seed_is_skipped_when_data_exists(storage):
    await seed_default_data(storage)

    assert await seed_default_data(storage) is False
    assert len(await storage.get_categories()) == len(DEFAULT_CATEGORIES)


@pytest.mark.asyncio
async def test_foreign_key_failures_name_the_missing_row(tmp_path):
    storage = PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'refs.db'}")
    await storage.open()
    try:
        user = await storage.create_user(
            schemas.UserCreate(username="writer", password="pw", email="writer@blog.io")
        )
        error = await storage._missing_reference(
            ("author", models.User, user.id),
            ("category", models.Category, 77),
        )
        assert isinstance(error, ReferenceViolationError)
        assert (error.entity, error.key) == ("category", 77)

        error = await storage._missing_reference(
            ("author", models.User, 99),
            ("post", models.Post, 1),
        )
        assert (error.entity, error.key) == ("author", 99)
    finally:
        await storage.close()
