"""
Print Preview - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.exceptions import register_exception_handlers
from api.routers import image, system
from common.constants import SystemConstants
from config import SystemConfig, get_settings
from core.pipeline import ImagePipeline
from core.session_manager import ImageSessionManager

# Get configuration
settings = get_settings()


def configure_logging(system: SystemConfig) -> None:
    """Configure root logging from system settings"""
    logging.basicConfig(
        level=getattr(logging, system.log_level),
        format=SystemConstants.LOG_FORMAT,
        filename=system.log_file,
    )


configure_logging(settings.system)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Print Preview server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    pipeline = ImagePipeline.from_config(settings.pipeline)
    session_manager = ImageSessionManager(max_sessions=settings.session.max_sessions)

    # Store in app state for access by routers
    app.state.pipeline = pipeline
    app.state.session_manager = session_manager
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    yield

    # Shutdown
    logger.info("Shutting down Print Preview server...")
    session_manager.cleanup()
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Print Preview",
    description="Image upload, resize and color filter pipeline for t-shirt print previews",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(image.router, prefix="/api/image", tags=["Image"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Print Preview",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "image": "/api/image",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "pipeline": getattr(app.state, "pipeline", None) is not None,
            "session_manager": getattr(app.state, "session_manager", None) is not None,
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
    )
