"""
API V1 Endpoints

FastAPI routers for all API endpoints.
"""

from .health import router as health_router
from .projects import router as projects_router
from .students import router as students_router
from .contact import router as contact_router

__all__ = [
    "health_router",
    "projects_router",
    "students_router",
    "contact_router",
]
