"""API routers for the REST API."""

from nesting.web.routers.feasibility import router as feasibility_router
from nesting.web.routers.nest import router as nest_router

__all__ = [
    "feasibility_router",
    "nest_router",
]
