import pytest

from blogsite import schemas
from blogsite.storage import DuplicateSlugError


@pytest.mark.asyncio
async def test_categories_round_trip(storage):
    tech = await storage.create_category(schemas.CategoryCreate(name="Tech", slug="tech"))
    design = await storage.create_category(
        schemas.CategoryCreate(name="Design", slug="design", description="UI and UX")
    )

    assert [c.slug for c in await storage.get_categories()] == ["tech", "design"]
    assert await storage.get_category_by_slug("design") == design
    assert tech.description is None


@pytest.mark.asyncio
async def test_duplicate_category_slug(storage):
    await storage.create_category(schemas.CategoryCreate(name="Tech", slug="tech"))

    with pytest.raises(DuplicateSlugError):
        await storage.create_category(schemas.CategoryCreate(name="Technology", slug="tech"))

    assert len(await storage.get_categories()) == 1


@pytest.mark.asyncio
async def test_tags_round_trip(storage):
    react = await storage.create_tag(schemas.TagCreate(name="React", slug="react"))

    assert await storage.get_tags() == [react]
    assert await storage.get_tag_by_slug("react") == react
    assert await storage.get_tag_by_slug("vue") is None


@pytest.mark.asyncio
async def test_duplicate_tag_slug(storage):
    await storage.create_tag(schemas.TagCreate(name="React", slug="react"))

    with pytest.raises(DuplicateSlugError):
        await storage.create_tag(schemas.TagCreate(name="ReactJS", slug="react"))


def test_slug_must_be_url_safe():
    with pytest.raises(ValueError):
        schemas.CategoryCreate(name="Tech", slug="Tech News")
