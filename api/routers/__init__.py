"""
Router package for the Streak Progress API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- progress: Exercise progress, previous performance, comparison, superset labels
- sync: Import of workouts completed on the companion device
"""

from api.routers.health import router as health_router
from api.routers.progress import router as progress_router
from api.routers.sync import router as sync_router

__all__ = [
    "health_router",
    "progress_router",
    "sync_router",
]
