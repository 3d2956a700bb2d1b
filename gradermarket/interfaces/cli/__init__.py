"""
CLI Interface - Command-line tools for GraderMarket.

Provides commands for:
- Catalog sync and JSON import
- Search queries against the local snapshot
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
