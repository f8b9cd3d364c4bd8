# blogsite/api/api.py

import logging

from fastapi import APIRouter

from blogsite.api.endpoints import categories, comments, posts, tags, users, waitlist

# Set up logging
logger = logging.getLogger(__name__)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
logger.info("Users router included successfully")

api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
logger.info("Categories router included successfully")

api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
logger.info("Tags router included successfully")

api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
logger.info("Posts router included successfully")

api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
logger.info("Comments router included successfully")

api_router.include_router(waitlist.router, prefix="/waitlist", tags=["waitlist"])
logger.info("Waitlist router included successfully")

logger.debug(f"API routes configured: {[getattr(route, 'path', route) for route in api_router.routes]}")
