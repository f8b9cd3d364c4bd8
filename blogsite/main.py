import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogsite.api.api import api_router
from blogsite.core.config import Settings, log_settings
from blogsite.core.config import settings as default_settings
from blogsite.storage import (
    BlogStorage,
    ConflictError,
    NotFoundError,
    ReferenceViolationError,
    StorageUnavailableError,
    create_storage,
    seed_default_data,
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[BlogStorage] = None) -> FastAPI:
    """Build the API application.

    The storage backend is opened in the lifespan hook and closed again at
    shutdown.  Pass ``storage`` to run the app against an existing
    instance (tests do this); otherwise one is built from ``settings``.
    """
    settings = settings or default_settings
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application is starting up")
        log_settings(settings)
        app.state.storage = storage or create_storage(settings)
        try:
            await app.state.storage.open()
            if settings.SEED_DEFAULT_DATA:
                try:
                    await seed_default_data(app.state.storage)
                except ConflictError as e:
                    # another worker seeded first
                    logger.warning(f"Skipping default data: {str(e)}")
            yield
        finally:
            logger.info("Application is shutting down")
            await app.state.storage.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH"],
            allow_headers=["*"],
        )
        logger.info(f"CORS middleware added with origins: {settings.BACKEND_CORS_ORIGINS}")
    else:
        logger.warning("No CORS origins specified. CORS middleware not added.")

    app.include_router(api_router, prefix=settings.API_PREFIX)
    logger.info("API router included")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse({"detail": jsonable_encoder(exc.errors())}, status_code=400)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    @app.exception_handler(ReferenceViolationError)
    async def reference_error_handler(request: Request, exc: ReferenceViolationError):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse({"detail": str(exc)}, status_code=404)

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse({"detail": str(exc)}, status_code=409)

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
        logger.error(f"Storage unavailable while serving {request.url.path}: {str(exc)}")
        return JSONResponse({"detail": "Service temporarily unavailable"}, status_code=503)

    @app.get("/health")
    async def health_check(request: Request):
        try:
            await request.app.state.storage.ping()
            logger.info("Health check passed")
            return {"status": "healthy", "storage": settings.STORAGE_BACKEND}
        except StorageUnavailableError as e:
            logger.error(f"Health check failed: {str(e)}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "storage": settings.STORAGE_BACKEND},
            )

    return app


app = create_app()


def run():
    uvicorn.run("blogsite.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
