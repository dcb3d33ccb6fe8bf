"""
API V1 Schemas

Pydantic models for request/response validation.
"""

from .common import (
    AVAILABLE_ROUTES,
    MessageResponse,
    ErrorResponse,
    NotFoundResponse,
    RateLimitResponse,
)

from .health import (
    HealthResponse,
    WelcomeResponse,
)

from .catalog import (
    ProjectListResponse,
    StudentListResponse,
)

from core.contact import (
    ContactMessage,
    REQUIRED_FIELDS,
)

__all__ = [
    # Common
    "AVAILABLE_ROUTES",
    "MessageResponse",
    "ErrorResponse",
    "NotFoundResponse",
    "RateLimitResponse",

    # Health
    "HealthResponse",
    "WelcomeResponse",

    # Catalog
    "ProjectListResponse",
    "StudentListResponse",

    # Contact
    "ContactMessage",
    "REQUIRED_FIELDS",
]
