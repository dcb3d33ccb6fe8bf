"""
Monitoring & Observability Layer

Structured logging for the SakuraDevClass backend:
- JSON and text formatting
- Request ID context injection
- Environment presets
"""

from .logging import (
    JSONFormatter,
    TextFormatter,
    ContextFilter,
    StructuredLogger,
    configure_logging,
    configure_from_preset,
    get_logger,
    set_request_context,
    clear_request_context,
    get_request_id,
    LOGGING_PRESETS,
)

__all__ = [
    'JSONFormatter',
    'TextFormatter',
    'ContextFilter',
    'StructuredLogger',
    'configure_logging',
    'configure_from_preset',
    'get_logger',
    'set_request_context',
    'clear_request_context',
    'get_request_id',
    'LOGGING_PRESETS',
]
