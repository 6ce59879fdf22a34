"""
Student Attendance - Check-in/checkout REST backend
"""
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from atams.logging import setup_logging_from_settings, get_logger
from atams.middleware import RequestIDMiddleware
from atams.exceptions import setup_exception_handlers

from app.core.config import settings
from app.core.exceptions import setup_store_exception_handlers
from app.api.deps import recent_scans
from app.api.v1.api import api_router

# Setup logging
setup_logging_from_settings(settings)
logger = get_logger(__name__)


async def purge_recent_scans(interval_seconds: float) -> None:
    """Drop expired debounce keys until cancelled"""
    while True:
        await asyncio.sleep(interval_seconds)
        purged = recent_scans.purge()
        if purged:
            logger.debug(f"Purged {purged} expired scan keys")


@asynccontextmanager
async def lifespan(app: FastAPI):
    purge_task = asyncio.create_task(purge_recent_scans(settings.RECENT_SCAN_PURGE_INTERVAL))
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    try:
        yield
    finally:
        purge_task.cancel()
        try:
            await purge_task
        except asyncio.CancelledError:
            pass


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Student attendance check-in/checkout service",
    swagger_ui_parameters={
        "persistAuthorization": True,
    },
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
)

# Request ID middleware
app.add_middleware(RequestIDMiddleware)

# Exception handlers
setup_exception_handlers(app)
setup_store_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    """API Root - Basic information"""
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION}
