# blogsite/api/endpoints/tags.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, ConflictError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[schemas.Tag])
async def read_tags(storage: BlogStorage = Depends(deps.get_storage)):
    return await storage.get_tags()


@router.get("/{slug}", response_model=schemas.Tag)
async def read_tag(slug: str, storage: BlogStorage = Depends(deps.get_storage)):
    tag = await storage.get_tag_by_slug(slug)
    if tag is None:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


@router.post("", response_model=schemas.Tag, status_code=201)
async def create_tag(tag: schemas.TagCreate, storage: BlogStorage = Depends(deps.get_storage)):
    try:
        return await storage.create_tag(tag)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{tag_id}/posts", response_model=List[schemas.Post])
async def read_tag_posts(
    tag_id: int,
    page: deps.Pagination = Depends(),
    storage: BlogStorage = Depends(deps.get_storage),
):
    return await storage.get_posts_by_tag(tag_id, limit=page.limit, offset=page.offset)
