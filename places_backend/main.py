import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from places_backend.api.v1.routes.health import router as health_router
from places_backend.api.v1.routes.places import router as places_router
from places_backend.core.dependencies import get_place_details_repository, get_place_details_service
from places_backend.core.settings import settings
from places_backend.infrastructure.external_apis.http_client import close_shared_client
from places_backend.infrastructure.persistence.db import dispose_engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    logger.info("Starting up places backend...")

    # Detect the durable store once; failures degrade to in-process caching
    repository = get_place_details_repository()
    if repository is None:
        logger.info("Serving place details from in-process cache only")

    yield

    # Shutdown
    logger.info("Shutting down places backend...")
    await get_place_details_service().flush_pending_writes()
    await close_shared_client()
    if repository is not None:
        try:
            await repository.close()
        except Exception as e:
            logger.error(f"Error closing durable place store: {e}")
    dispose_engine()


def create_app() -> FastAPI:
    """Create FastAPI application and include routers."""
    app = FastAPI(
        title="Places Backend",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(places_router, prefix="/api/v1")
    app.include_router(health_router, prefix="/api/v1")
    return app


app = create_app()


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
