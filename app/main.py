"""FastAPI application factory and main entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.dependencies import build_pipeline
from app.api.routes import router
from app.config import get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Data source mode: {settings.data_source}")

    app.state.pipeline = build_pipeline(settings)
    logger.info(f"Serving networks: {app.state.pipeline.fetcher.supported_networks}")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await app.state.pipeline.fetcher.close()
    logger.info("Cleanup complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Per-transaction risk triage for blockchain networks. Classifies "
            "a transaction, detects the protocol it touches and returns a "
            "bounded risk score with supporting reasons."
        ),
        version=settings.app_version,
        lifespan=lifespan,
    )

    allowed_origins = ["*"]
    if settings.allowed_origins:
        allowed_origins = [
            origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()
        ]

    allow_credentials = True
    if "*" in allowed_origins and not settings.debug:
        logger.warning("CORS: Using wildcard origins in production is not recommended")
        allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    app.include_router(router)

    @app.get("/", tags=["root"])
    async def root() -> dict[str, str]:
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
