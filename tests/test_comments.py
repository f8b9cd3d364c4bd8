import pytest

from blogsite import schemas
from blogsite.storage import ReferenceViolationError


@pytest.mark.asyncio
async def test_comments_newest_first(storage, author, post_draft):
    post = await storage.create_post(post_draft("discussed"))
    created = []
    for text in ("first", "second", "third"):
        created.append(
            await storage.create_comment(
                schemas.CommentCreate(content=text, author_id=author.id, post_id=post.id)
            )
        )

    comments = await storage.get_comments_by_post(post.id)

    assert [c.id for c in comments] == [c.id for c in reversed(created)]
    assert [c.content for c in comments] == ["third", "second", "first"]
    assert all(c.created_at.tzinfo is not None for c in comments)


@pytest.mark.asyncio
async def test_comments_are_scoped_to_post(storage, author, post_draft):
    one = await storage.create_post(post_draft("one"))
    two = await storage.create_post(post_draft("two"))
    await storage.create_comment(schemas.CommentCreate(content="hi", author_id=author.id, post_id=one.id))

    assert await storage.get_comments_by_post(two.id) == []
    assert await storage.get_comments_by_post(999) == []


@pytest.mark.asyncio
async def test_comment_references_must_exist(storage, author, post_draft):
    post = await storage.create_post(post_draft("discussed"))

    with pytest.raises(ReferenceViolationError):
        await storage.create_comment(
            schemas.CommentCreate(content="hi", author_id=author.id, post_id=post.id + 100)
        )
    with pytest.raises(ReferenceViolationError):
        await storage.create_comment(
            schemas.CommentCreate(content="hi", author_id=author.id + 100, post_id=post.id)
        )

    assert await storage.get_comments_by_post(post.id) == []
