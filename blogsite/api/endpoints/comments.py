# blogsite/api/endpoints/comments.py

import logging

from fastapi import APIRouter, Depends, HTTPException

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, ReferenceViolationError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=schemas.Comment, status_code=201)
async def create_comment(comment: schemas.CommentCreate, storage: BlogStorage = Depends(deps.get_storage)):
    try:
        return await storage.create_comment(comment)
    except ReferenceViolationError as e:
        raise HTTPException(status_code=400, detail=str(e))
