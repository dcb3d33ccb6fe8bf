"""
Global Error Handler Middleware - API Layer

Catches every exception raised by route handlers and dependencies and turns
it into a JSON error response. This is the only recovery point for handler
failures.

@.architecture
Incoming: app.py (middleware registration), Exception objects from endpoints --- {ASGI scope, Python exceptions}
Processing: __call__(), _handle_error(), _build_error_response(), _log_error() --- {4 jobs: exception_catching, response_formatting, logging, started_response_guard}
Outgoing: monitoring/logging.py, Frontend (HTTP) --- {error logs with stack traces, JSONResponse {success: false, message, error?}}
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from api.v1.schemas.common import ErrorResponse
from monitoring import get_logger
from security.validation import ValidationError

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorHandlerConfig:
    """Configuration for error handler."""

    def __init__(
        self,
        expose_error_details: bool = False,
        log_errors: bool = True,
    ):
        """
        Initialize error handler configuration.

        Args:
            expose_error_details: Put the raw exception message in the
                ``error`` field of 500 responses (development only)
            log_errors: Log errors to logger
        """
        self.expose_error_details = expose_error_details
        self.log_errors = log_errors


class ErrorHandlerMiddleware:
    """
    Middleware for global error handling.

    Every exception, body parsing failures included, becomes the same
    generic 500. The exception message is added as ``error`` only when the
    config allows it.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[ErrorHandlerConfig] = None
    ):
        self.app = app
        self.config = config or ErrorHandlerConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking_start(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking_start)
        except Exception as e:
            if response_started:
                # Headers are gone; nothing left to replace
                logger.error(
                    f"Error after response started: {e}",
                    exc_info=e,
                    path=scope.get("path", ""),
                )
                raise
            response = self._handle_error(Request(scope), e)
            await response(scope, receive, send)

    def _handle_error(self, request: Request, error: Exception) -> JSONResponse:
        if self.config.log_errors:
            self._log_error(request, error)

        return JSONResponse(
            status_code=500,
            content=self._build_error_response(error),
        )

    def _build_error_response(self, error: Exception) -> dict:
        body = ErrorResponse(message=INTERNAL_ERROR_MESSAGE)
        if self.config.expose_error_details:
            body.error = str(error)
        return body.model_dump(exclude_none=True)

    def _log_error(self, request: Request, error: Exception) -> None:
        context = {
            "method": request.method,
            "path": str(request.url.path),
            "status_code": 500,
            "error_type": type(error).__name__,
            "client": request.client.host if request.client else "unknown",
        }

        if isinstance(error, ValidationError):
            # Rejected input, no stack trace needed
            logger.warning(f"Invalid request body: {error}", **context)
        else:
            logger.error(
                f"Server error: {error}",
                exc_info=error,
                **context
            )


def create_error_handler_middleware(
    development: bool = False
):
    """
    Create error handler middleware factory with environment-appropriate config.

    Args:
        development: Whether running in development mode

    Returns:
        Middleware class and kwargs for FastAPI
    """
    config = ErrorHandlerConfig(
        expose_error_details=development,
        log_errors=True,
    )
    return (ErrorHandlerMiddleware, {"config": config})
