"""
FastAPI Main Application - Search API entry point.

Run with: uvicorn gradermarket.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gradermarket import __version__
from gradermarket.config import get_settings

from .deps import cleanup_services, init_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RateLimitMiddleware,
    RequestIDMiddleware,
)
from .rate_limit import RateLimiter
from .routes import catalog, health, search

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting GraderMarket API...")
    logger.info("  Snapshot: %s", settings.db_path)

    await init_services()
    logger.info("  Services initialized")

    yield

    logger.info("Shutting down GraderMarket API...")
    await cleanup_services()


def create_app(limiter: RateLimiter | None = None) -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="GraderMarket API",
        description="Live search over road-grader and spare-part listings",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters - last added = outermost)
    # 1. Rate limiting (innermost - runs after the request id is set)
    if limiter is None:
        limiter = RateLimiter(
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.add_middleware(RateLimitMiddleware, limiter=limiter)

    # 2. Error handling (catch exceptions from inner layers)
    app.add_middleware(ErrorHandlerMiddleware)

    # 3. Latency tracking
    app.add_middleware(LatencyMiddleware)

    # 4. Request ID (outermost custom - runs first)
    app.add_middleware(RequestIDMiddleware)

    # 5. CORS (framework middleware)
    allowed_origins = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Marketplace backend
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]
    if settings.api_debug:
        allowed_origins.append("http://localhost:8000")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(search.router, prefix="/api/search", tags=["Search"])
    app.include_router(catalog.router, prefix="/api/catalog", tags=["Catalog"])

    return app


# Create app instance
app = create_app()
