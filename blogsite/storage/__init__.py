# blogsite/storage/__init__.py

import logging

from blogsite.core.config import Settings
from .database import PersistentStorage
from .errors import (
    ConflictError,
    DuplicateEmailError,
    DuplicatePostTagError,
    DuplicateSlugError,
    DuplicateUsernameError,
    DuplicateWaitlistEmailError,
    NotFoundError,
    ReferenceViolationError,
    StorageError,
    StorageUnavailableError,
)
from .interface import BlogStorage
from .memory import VolatileStorage
from .seed import seed_default_data

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> BlogStorage:
    """Pick the backend named by ``settings.STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == "database":
        logger.info("Storage backend: database")
        return PersistentStorage(
            settings.DATABASE_URL,
            create_tables=settings.AUTO_CREATE_TABLES,
            operation_timeout=settings.STORAGE_TIMEOUT_SECONDS,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=settings.DB_ECHO,
        )
    logger.info("Storage backend: memory")
    return VolatileStorage()


__all__ = [
    "BlogStorage",
    "PersistentStorage",
    "VolatileStorage",
    "create_storage",
    "seed_default_data",
    "StorageError",
    "ConflictError",
    "DuplicateUsernameError",
    "DuplicateEmailError",
    "DuplicateWaitlistEmailError",
    "DuplicateSlugError",
    "DuplicatePostTagError",
    "ReferenceViolationError",
    "NotFoundError",
    "StorageUnavailableError",
]
