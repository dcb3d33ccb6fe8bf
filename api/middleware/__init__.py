"""
API Middleware Layer

Provides middleware components for request/response processing including:
- Security headers
- Request ID context
- Rate limiting
- Error handling
- CORS and compression (via Starlette)
"""

from .security import (
    SecurityHeadersMiddleware,
    SecurityHeadersConfig,
    create_security_headers_middleware,
)

from .request_context import (
    RequestContextMiddleware,
    REQUEST_ID_HEADER,
)

from .rate_limiter import (
    RateLimiterMiddleware,
    create_rate_limiter_middleware,
)

from .error_handler import (
    ErrorHandlerMiddleware,
    ErrorHandlerConfig,
    INTERNAL_ERROR_MESSAGE,
    create_error_handler_middleware,
)

__all__ = [
    # Security headers
    'SecurityHeadersMiddleware',
    'SecurityHeadersConfig',
    'create_security_headers_middleware',

    # Request context
    'RequestContextMiddleware',
    'REQUEST_ID_HEADER',

    # Rate limiting
    'RateLimiterMiddleware',
    'create_rate_limiter_middleware',

    # Error handling
    'ErrorHandlerMiddleware',
    'ErrorHandlerConfig',
    'INTERNAL_ERROR_MESSAGE',
    'create_error_handler_middleware',
]
