import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blogcms.core import database
from blogcms.core.config import settings
from blogcms.core.exceptions import ServiceException
from blogcms.core.logging import setup_logging
from blogcms.core.response.handlers import (
    global_exception_handler,
    request_validation_handler,
    service_exception_handler,
)
from blogcms.core.services.upload_service import upload_service

# Import routers from apps
from blogcms.apps.auth import auth_router
from blogcms.apps.auth.routers.auth_router import get_auth_service
from blogcms.apps.blog import post_router

setup_logging()
logger = logging.getLogger(__name__)

# Static mount needs the directory to exist at import time.
upload_service.ensure_upload_dir()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables and seed the default admin
    await database.create_db_and_tables()
    logger.info("Database connected successfully")
    upload_service.ensure_upload_dir()
    await get_auth_service().ensure_default_admin()
    yield
    # Shutdown: Clean up resources if needed
    logger.info("Shutting down...")
    await database.dispose_engine()


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_INFO,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware; the public site and the admin panel are separate origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers
app.add_exception_handler(ServiceException, service_exception_handler)  # type: ignore
app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore
app.add_exception_handler(Exception, global_exception_handler)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with health check."""
    return {"message": "Server is running!", "status": "healthy", "version": settings.PROJECT_VERSION}


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "message": "Service is running normally"}


# Include app routers
app.include_router(auth_router)
app.include_router(post_router)

# Uploaded images, served from the same path their references point at
app.mount(
    upload_service.url_prefix,
    StaticFiles(directory=upload_service.upload_dir),
    name="uploads",
)


if __name__ == "__main__":
    uvicorn.run(
        "blogcms.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
