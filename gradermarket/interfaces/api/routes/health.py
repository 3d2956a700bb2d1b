"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from gradermarket import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "gradermarket"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "GraderMarket Search API",
        "version": __version__,
        "description": "Live search over road-grader and spare-part listings",
        "docs": "/docs",
    }
