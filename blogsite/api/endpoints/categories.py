# blogsite/api/endpoints/categories.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, ConflictError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[schemas.Category])
async def read_categories(storage: BlogStorage = Depends(deps.get_storage)):
    return await storage.get_categories()


@router.get("/{slug}", response_model=schemas.Category)
async def read_category(slug: str, storage: BlogStorage = Depends(deps.get_storage)):
    category = await storage.get_category_by_slug(slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("", response_model=schemas.Category, status_code=201)
async def create_category(category: schemas.CategoryCreate, storage: BlogStorage = Depends(deps.get_storage)):
    try:
        return await storage.create_category(category)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{category_id}/posts", response_model=List[schemas.Post])
async def read_category_posts(
    category_id: int,
    page: deps.Pagination = Depends(),
    storage: BlogStorage = Depends(deps.get_storage),
):
    return await storage.get_posts_by_category(category_id, limit=page.limit, offset=page.offset)
