from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.errors import install_error_handlers
from app.core.logging import configure_logging, request_id_middleware
from app.db.init import create_tables, sanitize_db_url
from app.matching.router import router as matching_router

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.ENV, settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    logger.info("=" * 70)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database: {sanitize_db_url(settings.database_url)}")
    logger.info("=" * 70)

    await create_tables()
    logger.info("✓ Startup complete - auto-matching runs on demand (POST /matching/auto)")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.middleware("http")(request_id_middleware)
install_error_handlers(app)
app.include_router(matching_router)


@app.get("/")
def health_check():
    logger.debug("Health check endpoint called")
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    return {"status": "healthy", "env": settings.ENV}
