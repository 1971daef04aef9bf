"""Main FastAPI application for Image Foundry."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from image_foundry.config import settings
from image_foundry.api import router
from image_foundry.services import SessionOrchestrator, build_orchestrator


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(orchestrator: Optional[SessionOrchestrator] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Without an explicit orchestrator one is built from `settings` at startup,
    so every app instance owns its own store.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("🚀 Starting Image Foundry...")
        app.state.orchestrator = orchestrator or build_orchestrator(settings)
        logger.info("✅ All systems ready")

        yield

        logger.info("🛑 Shutting down...")
        app.state.orchestrator.store.engine.dispose()
        logger.info("✅ Shutdown complete")

    app = FastAPI(
        title="Image Foundry",
        description="Guided prompt -> description -> feedback -> image workflow",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Image Foundry",
            "version": "0.1.0",
            "status": "running",
            "docs": "/docs",
        }

    return app


configure_logging(settings.log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "image_foundry.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
