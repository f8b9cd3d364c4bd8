# blogsite/api/endpoints/users.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, ConflictError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=schemas.UserPublic)
async def read_user(user_id: int, storage: BlogStorage = Depends(deps.get_storage)):
    user = await storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("", response_model=schemas.UserPublic, status_code=201)
async def create_user(user: schemas.UserCreate, storage: BlogStorage = Depends(deps.get_storage)):
    logger.info(f"Received registration for username: {user.username}")
    try:
        return await storage.create_user(user)
    except ConflictError as e:
        logger.warning(f"Registration failed: {str(e)}")
        raise HTTPException(status_code=409, detail=str(e))
