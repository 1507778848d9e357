"""API routers for the REST API."""

from slotting.web.routers.availability import router as availability_router
from slotting.web.routers.commits import router as commits_router
from slotting.web.routers.layout import router as layout_router
from slotting.web.routers.recommendations import router as recommendations_router
from slotting.web.routers.validate import router as validate_router

__all__ = [
    "availability_router",
    "commits_router",
    "layout_router",
    "recommendations_router",
    "validate_router",
]
