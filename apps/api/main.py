"""TubeLoop API"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tubeloop.config import Settings
from routes.health import router as health_router
from routes.links import router as links_router
from tubeloop.utils.logging_setup import setup_logging

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("tubeloop.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    logger.info(
        "API starting (player=%s, watch_url=%s)", settings.player.provider, settings.links.watch_url
    )
    try:
        yield
    finally:
        logger.info("API stopped")


app = FastAPI(
    title="TubeLoop API",
    description="YouTube loop segments: share links and session state",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(links_router)
app.include_router(health_router)
