"""
Security Layer

Request-facing protections for the SakuraDevClass backend:
- Per-client rate limiting
- Body size limits and presence validation
"""

from .validation import (
    ValidationError,
    SizeExceededError,
    validate_body_size,
    is_empty,
    missing_fields,
)

from .rate_limit import (
    RateLimiter,
    RateLimitConfig,
    RateLimitExceeded,
    WindowState,
    DEFAULT_LIMIT_MESSAGE,
)

__all__ = [
    # Validation
    'ValidationError',
    'SizeExceededError',
    'validate_body_size',
    'is_empty',
    'missing_fields',

    # Rate limiting
    'RateLimiter',
    'RateLimitConfig',
    'RateLimitExceeded',
    'WindowState',
    'DEFAULT_LIMIT_MESSAGE',
]
