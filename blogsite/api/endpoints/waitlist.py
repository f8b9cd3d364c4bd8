# blogsite/api/endpoints/waitlist.py

import logging

from fastapi import APIRouter, Depends, HTTPException

from blogsite import schemas
from blogsite.api import deps
from blogsite.storage import BlogStorage, DuplicateWaitlistEmailError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=schemas.Waitlist, status_code=201)
async def join_waitlist(entry: schemas.WaitlistCreate, storage: BlogStorage = Depends(deps.get_storage)):
    logger.info(f"Received waitlist request for email: {entry.email}")
    try:
        return await storage.add_to_waitlist(entry)
    except DuplicateWaitlistEmailError as e:
        logger.warning(f"Waitlist signup rejected: {str(e)}")
        raise HTTPException(status_code=409, detail=str(e))
