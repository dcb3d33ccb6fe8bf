"""
Common Schemas

Shared Pydantic models used across API endpoints and middleware.

@.architecture
Incoming: api/v1/endpoints/*.py, api/middleware/error_handler.py, app.py (404 handler) --- {messages, error details}
Processing: Pydantic validation and serialization --- {2 jobs: data_validation, serialization}
Outgoing: api/v1/endpoints/*.py, Frontend (HTTP) --- {MessageResponse, ErrorResponse, NotFoundResponse, RateLimitResponse validated models}
"""

from typing import List, Optional

from pydantic import BaseModel


AVAILABLE_ROUTES = [
    "/api/health",
    "/api/projects",
    "/api/students",
    "/api/contact",
]


# =============================================================================
# Response Models
# =============================================================================

class MessageResponse(BaseModel):
    """Success flag with a human-readable message."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """
    Error response model.

    ``error`` carries the raw exception message and is only populated in
    development.
    """
    success: bool = False
    message: str
    error: Optional[str] = None


class NotFoundResponse(BaseModel):
    """Body returned for any unmatched route."""
    success: bool = False
    message: str = "Route not found 🌸"
    availableRoutes: List[str] = AVAILABLE_ROUTES


class RateLimitResponse(BaseModel):
    """Body returned when a client exceeds its rate limit window."""
    error: str
