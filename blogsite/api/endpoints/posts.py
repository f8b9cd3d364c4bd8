# blogsite/api/endpoints/posts.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, ConflictError, NotFoundError, ReferenceViolationError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[schemas.Post])
async def read_posts(
    page: deps.Pagination = Depends(),
    storage: BlogStorage = Depends(deps.get_storage),
):
    return await storage.get_posts(limit=page.limit, offset=page.offset)


# Must be registered before /{slug} or "featured" is taken for a slug.
@router.get("/featured", response_model=List[schemas.Post])
async def read_featured_posts(
    limit: Optional[int] = Query(None, ge=0),
    storage: BlogStorage = Depends(deps.get_storage),
):
    return await storage.get_featured_posts(limit=limit)


@router.get("/{slug}", response_model=schemas.Post)
async def read_post(slug: str, storage: BlogStorage = Depends(deps.get_storage)):
    post = await storage.get_post_by_slug(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("", response_model=schemas.Post, status_code=201)
async def create_post(post: schemas.PostCreate, storage: BlogStorage = Depends(deps.get_storage)):
    logger.info(f"Received request to create post: {post.slug}")
    try:
        return await storage.create_post(post)
    except ReferenceViolationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{post_id}/views", response_model=schemas.Post)
async def increment_post_views(
    post_id: int = Path(..., title="The ID of the post that was viewed"),
    storage: BlogStorage = Depends(deps.get_storage),
):
    try:
        return await storage.update_post_views(post_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")


@router.get("/{post_id}/comments", response_model=List[schemas.Comment])
async def read_post_comments(post_id: int, storage: BlogStorage = Depends(deps.get_storage)):
    return await storage.get_comments_by_post(post_id)


@router.get("/{post_id}/tags", response_model=List[schemas.PostTag])
async def read_post_tags(post_id: int, storage: BlogStorage = Depends(deps.get_storage)):
    return await storage.get_post_tags(post_id)


@router.post("/{post_id}/tags", response_model=schemas.PostTag, status_code=201)
async def attach_tag(
    body: schemas.PostTagAttach,
    post_id: int = Path(..., title="The ID of the post to tag"),
    storage: BlogStorage = Depends(deps.get_storage),
):
    try:
        return await storage.add_tag_to_post(post_id, body.tag_id)
    except ReferenceViolationError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
