# blogsite/db/session.py

import logging

from sqlalchemy import event
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

logger = logging.getLogger(__name__)


def create_engine_for_url(
    database_url: str,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
) -> AsyncEngine:
    """Build the async engine for ``database_url``.

    SQLite connections get foreign key enforcement switched on, and file
    databases use WAL journalling so readers do not block the writer.
    """
    url = make_url(database_url)
    kwargs = {"echo": echo, "pool_pre_ping": True}
    is_sqlite = url.get_backend_name() == "sqlite"
    in_memory = is_sqlite and (not url.database or url.database == ":memory:")

    if is_sqlite:
        kwargs["connect_args"] = {"timeout": 30}
    if not in_memory:
        kwargs["poolclass"] = AsyncAdaptedQueuePool
        kwargs["pool_size"] = pool_size
        kwargs["max_overflow"] = max_overflow

    engine = create_async_engine(url, **kwargs)

    @event.listens_for(engine.sync_engine, "connect")
    def connect(dbapi_connection, connection_record):
        if is_sqlite:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()
        logger.info("Database connection established")

    @event.listens_for(engine.sync_engine, "close")
    def close(dbapi_connection, connection_record):
        logger.info("Database connection closed")

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
