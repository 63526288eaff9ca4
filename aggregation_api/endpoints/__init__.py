"""HTTP endpoints, organized by function."""

from .health import router as health_router
from .readings import router as readings_router
from .aggregates import router as aggregates_router

__all__ = [
    "health_router",
    "readings_router",
    "aggregates_router",
]
