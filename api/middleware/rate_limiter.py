"""
Rate Limiter Middleware - API Layer

FastAPI middleware for rate limiting API requests per client address.

@.architecture
Incoming: app.py (middleware registration), security/rate_limit.py --- {FastAPI Request objects, RateLimiter instance, path prefix}
Processing: __call__(), _get_client_id(), _applies_to(), _add_rate_limit_headers() --- {4 jobs: request_identification, scope_check, limit_checking, header_injection}
Outgoing: Frontend (HTTP), security/rate_limit.py --- {HTTP Response with X-RateLimit-* headers, HTTP 429 JSON on limit exceeded}
"""

import math
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from api.v1.schemas.common import RateLimitResponse
from monitoring import get_logger
from security.rate_limit import RateLimiter, RateLimitExceeded

logger = get_logger(__name__)


class RateLimiterMiddleware:
    """
    Middleware to apply rate limiting to API endpoints.

    Features:
    - Per-IP rate limiting (proxy headers honoured)
    - Applies only under a path prefix
    - Rate limit headers in responses
    - Fixed JSON body on rejection
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: RateLimiter,
        path_prefix: str = "/api",
    ):
        """
        Initialize rate limiter middleware.

        Args:
            app: ASGI application
            limiter: Counter store shared by every request
            path_prefix: Only paths equal to or below this prefix are counted
        """
        self.app = app
        self.limiter = limiter
        self.path_prefix = path_prefix.rstrip("/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        if not self._applies_to(request.url.path):
            await self.app(scope, receive, send)
            return

        client_id = self._get_client_id(request)

        try:
            self.limiter.hit(client_id)
        except RateLimitExceeded as e:
            logger.warning(
                "Rejecting request over rate limit",
                client=client_id,
                path=request.url.path,
            )
            response = JSONResponse(
                status_code=429,
                content=RateLimitResponse(error=str(e)).model_dump(),
            )
            self._add_rate_limit_headers(response.headers, self.limiter.get_limit_info(client_id))
            response.headers["Retry-After"] = str(math.ceil(e.retry_after))
            await response(scope, receive, send)
            return

        limit_info = self.limiter.get_limit_info(client_id)

        async def send_with_limit_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._add_rate_limit_headers(MutableHeaders(scope=message), limit_info)
            await send(message)

        await self.app(scope, receive, send_with_limit_headers)

    def _applies_to(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    def _get_client_id(self, request: Request) -> str:
        """
        Extract client identifier from request.

        Args:
            request: HTTP request

        Returns:
            Client identifier (IP address)
        """
        # Try X-Forwarded-For header first (for proxies)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # Take first IP in chain
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        if request.client:
            return request.client.host

        return "unknown"

    def _add_rate_limit_headers(
        self,
        headers: MutableHeaders,
        limit_info: Dict[str, Any]
    ) -> None:
        headers["X-RateLimit-Limit"] = str(limit_info['limit'])
        headers["X-RateLimit-Remaining"] = str(limit_info['remaining'])
        headers["X-RateLimit-Reset"] = str(limit_info['reset'])


def create_rate_limiter_middleware(
    limiter: RateLimiter,
    path_prefix: str = "/api",
):
    """
    Create rate limiter middleware factory.

    Args:
        limiter: Rate limiter owned by the application
        path_prefix: Path prefix to limit

    Returns:
        Middleware class and kwargs for FastAPI
    """
    return (RateLimiterMiddleware, {"limiter": limiter, "path_prefix": path_prefix})
