# tokenpulse/api/routes/__init__.py
"""API route modules."""

from tokenpulse.api.routes.health import router as health_router
from tokenpulse.api.routes.realtime import router as realtime_router
from tokenpulse.api.routes.versions import router as versions_router

__all__ = [
    "health_router",
    "realtime_router",
    "versions_router",
]
