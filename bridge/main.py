import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bridge.api.router import api_router
from bridge.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Nothing is held open between requests: every query opens its own connection
    logger.info(
        f"Bridge ready (generation service: {settings.GENERATION_URL}, "
        f"model: {settings.GENERATION_MODEL})"
    )
    yield
    logger.info("Bridge shutting down")


app = FastAPI(title="Local Data Bridge", lifespan=lifespan)

# Include the master router containing all our endpoints
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Local Data Bridge"}
