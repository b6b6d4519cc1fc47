"""Web interface module.

Provides:
- FastAPI application with REST API
- Stop search and dot-matrix board pages
"""

from .app import create_app

__all__ = [
    "create_app",
]
