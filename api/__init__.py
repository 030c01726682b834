"""
HTTP API for the store operator console.

This package provides a single FastAPI application that exposes:
- The tracking endpoints (list, look up, create, update, delete)
- Order status updates
"""

from api.main import app

__all__ = ["app"]
