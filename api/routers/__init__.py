"""
Router package for the FitTrack cascade API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- subtrees: Duplicate, delete, cascade counts and reorder for program subtrees
"""

from api.routers.health import router as health_router
from api.routers.subtrees import router as subtrees_router

__all__ = [
    "health_router",
    "subtrees_router",
]
