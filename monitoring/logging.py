"""
Structured Logging - Monitoring Layer

Provides structured logging with:
- JSON formatting for log aggregation
- Text formatting with inline key=value fields for local development
- Request ID injection via context variables
- Configurable log levels per module

@.architecture
Incoming: app.py, api/middleware/*.py, core/contact/mailer.py, All modules via get_logger() --- {str log_level, str format_type, Dict[str, str] module_levels, str request_id}
Processing: configure_logging(), JSONFormatter.format(), TextFormatter.format(), set_request_context(), StructuredLogger._log_with_context() --- {4 jobs: context_injection, formatting, log_configuration, structured_logging}
Outgoing: sys.stdout, Log files, All modules --- {StructuredLogger instances, JSON or text formatted logs, context variables}
"""

import logging
import json
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Context variable for request tracking
request_id_ctx: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs one JSON document per record for log aggregation systems.
    """

    def __init__(
        self,
        include_traceback: bool = True,
        include_context: bool = True
    ):
        super().__init__()
        self.include_traceback = include_traceback
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if self.include_context:
            request_id = request_id_ctx.get()
            if request_id:
                log_data['request_id'] = request_id

        if record.exc_info and self.include_traceback:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_data['extra'] = record.extra_fields

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Human-readable formatter.

    Structured fields passed through StructuredLogger are appended as
    ``key=value`` pairs so they are not lost outside JSON mode.
    """

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)-30s | [%(request_id)s] | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, 'extra_fields', None)
        if not fields:
            return line
        rendered = " ".join(f"{key}={value!r}" for key, value in fields.items())
        # Keep the traceback (if any) after the fields
        head, sep, tail = line.partition("\n")
        return f"{head} | {rendered}{sep}{tail}"


class ContextFilter(logging.Filter):
    """
    Logging filter that adds context variables to log records.

    Required by TextFormatter, whose format string references request_id.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or '-'
        return True


class StructuredLogger:
    """
    Wrapper for Python logger with structured logging support.

    Keyword arguments given to the logging methods become structured
    fields on the record.
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log_with_context(
        self,
        level: int,
        message: str,
        exc_info: Any = None,
        **kwargs: Any
    ) -> None:
        extra = {'extra_fields': kwargs} if kwargs else {}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with context."""
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        """Log error message with context."""
        self._log_with_context(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def critical(self, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        """Log critical message with context."""
        self._log_with_context(logging.CRITICAL, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.exception(message, extra={'extra_fields': kwargs} if kwargs else {})


def configure_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_file: Optional[Path] = None,
    enable_console: bool = True,
    module_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format ("json" or "text")
        log_file: Optional file path for log output
        enable_console: Enable console (stdout) logging
        module_levels: Per-module log levels (e.g. {"uvicorn.access": "WARNING"})
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    handlers = []

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(ContextFilter())
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(ContextFilter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []
    for handler in handlers:
        root_logger.addHandler(handler)

    if module_levels:
        for module_name, module_level in module_levels.items():
            module_log_level = getattr(logging, module_level.upper(), logging.INFO)
            logging.getLogger(module_name).setLevel(module_log_level)

    # Silence noisy libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger for module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)


def set_request_context(request_id: Optional[str] = None) -> None:
    """Bind the request ID for the current task."""
    if request_id:
        request_id_ctx.set(request_id)


def clear_request_context() -> None:
    """Clear all context variables."""
    request_id_ctx.set(None)


def get_request_id() -> Optional[str]:
    """Get current request ID from context."""
    return request_id_ctx.get()


# Default configuration presets
LOGGING_PRESETS = {
    'development': {
        'level': 'INFO',
        'format_type': 'text',
        'enable_console': True,
        'module_levels': {
            'uvicorn.access': 'INFO',
        }
    },
    'production': {
        'level': 'INFO',
        'format_type': 'json',
        'enable_console': True,
        'module_levels': {
            'uvicorn.access': 'WARNING',
        }
    },
    'testing': {
        'level': 'WARNING',
        'format_type': 'text',
        'enable_console': True,
        'module_levels': {}
    }
}


def configure_from_preset(preset: str = 'development', **overrides: Any) -> None:
    """
    Configure logging from preset.

    Args:
        preset: Preset name ('development', 'production', or 'testing')
        **overrides: Override preset values
    """
    if preset not in LOGGING_PRESETS:
        raise ValueError(f"Unknown preset: {preset}. Available: {list(LOGGING_PRESETS.keys())}")

    config = LOGGING_PRESETS[preset].copy()
    config.update(overrides)

    configure_logging(**config)
