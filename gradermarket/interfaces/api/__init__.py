"""
API Interface - FastAPI REST API.

Serves live search and catalog browsing over the local catalog snapshot.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
