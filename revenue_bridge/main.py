"""
FastAPI application entry point for the Revenue Bridge API.

This module configures logging and CORS, registers the API router and
starts the ASGI server. The bridge data itself is generated per request by
revenue_bridge.services; the application holds no state.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from revenue_bridge.api import api_router
from revenue_bridge.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    Logs the generator defaults on startup so a changed DEFAULT_SEED is
    visible in the service logs.
    """
    # Startup
    logger.info(
        f"{settings.api_title} starting "
        f"(seed={settings.default_seed!r}, segment={settings.default_segment.value}, "
        f"view={settings.default_view.value})"
    )

    yield

    # Shutdown
    logger.info(f"{settings.api_title} shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=(
        "Deterministic plan-vs-actual revenue variance bridge. "
        "Provides the bridge data model, dashboard view models, "
        "driver drill-downs and month selector options."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "revenue_bridge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
