from contextlib import asynccontextmanager

from fastapi import FastAPI
import logging

from app.api.feeds import router as feeds_router
from app.api.health import router as health_router
from app.api.support import router as support_router
from app.api.videos import router as videos_router
from core.config import get_settings
from core.logging import setup_json_logging
from service.health_service import VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging once settings are readable"""
    setup_json_logging(get_settings().log_level)
    logger.info("Starting Video Discovery API", extra={"trace_id": "system_init"})
    yield


app = FastAPI(title="Video Discovery API", version=VERSION, lifespan=lifespan)

# Include routers
app.include_router(health_router)  # Health at root level
app.include_router(feeds_router, prefix="/api")
app.include_router(support_router, prefix="/api")
app.include_router(videos_router, prefix="/api")
