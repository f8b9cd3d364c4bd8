"""
Shared fixtures.

The ``storage`` fixture is parametrised so every contract test runs once
against ``VolatileStorage`` and once against ``PersistentStorage`` on a
throwaway SQLite file.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from blogsite import schemas
from blogsite.storage import PersistentStorage, VolatileStorage

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


async def open_backend(kind, tmp_path):
    if kind == "memory":
        backend = VolatileStorage()
    else:
        backend = PersistentStorage(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    await backend.open()
    return backend


@pytest_asyncio.fixture(params=["memory", "database"])
async def storage(request, tmp_path):
    backend = await open_backend(request.param, tmp_path)
    try:
        yield backend
    finally:
        await backend.close()


@pytest_asyncio.fixture
async def author(storage):
    return await storage.create_user(
        schemas.UserCreate(username="sarah", password="secret", email="sarah@blog.io", full_name="Sarah")
    )


@pytest_asyncio.fixture
async def category(storage):
    return await storage.create_category(schemas.CategoryCreate(name="Tech", slug="tech"))


@pytest.fixture
def post_draft(author, category):
    """Factory for post drafts; ``hours`` shifts published_at from BASE_TIME."""

    def make(slug, hours=0, **fields):
        data = dict(
            title=slug.replace("-", " ").title(),
            slug=slug,
            excerpt="excerpt",
            content="content",
            author_id=author.id,
            category_id=category.id,
            published_at=BASE_TIME + timedelta(hours=hours),
        )
        data.update(fields)
        return schemas.PostCreate(**data)

    return make
