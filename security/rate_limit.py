"""
Rate Limiting - Security Layer

Fixed-window request counting per client address. Each client gets a window
that opens on its first request and lasts ``window_seconds``; at most
``max_requests`` requests are admitted inside one window.

The limiter is an ordinary object owned by whoever builds the application
(see app.create_app) and handed to the middleware, so tests and alternative
deployments can construct their own with a different clock or limits.

@.architecture
Incoming: api/middleware/rate_limiter.py, app.py --- {str client_id, RateLimitConfig}
Processing: hit(), get_limit_info(), reset_client(), _cleanup_expired() --- {3 jobs: cleanup, counting, window_management}
Outgoing: api/middleware/rate_limiter.py --- {WindowState or raises RateLimitExceeded, Dict[str, Any] limit info}
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from monitoring import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT_MESSAGE = "Too many requests, please try again in 15 minutes"


class RateLimitExceeded(Exception):
    """Raised when a client has used up its window."""

    def __init__(self, message: str, retry_after: float, limit: int, reset_at: float):
        super().__init__(message)
        self.retry_after = retry_after
        self.limit = limit
        self.reset_at = reset_at


@dataclass
class RateLimitConfig:
    """Configuration for rate limiter."""

    max_requests: int = 100               # Requests admitted per window
    window_seconds: float = 15 * 60       # Window length
    message: str = DEFAULT_LIMIT_MESSAGE

    # Cleanup
    cleanup_interval: float = 60.0


@dataclass
class WindowState:
    """Hit counter for one client within its current window."""

    hits: int
    reset_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.reset_at


class RateLimiter:
    """
    In-memory fixed-window rate limiter keyed by client address.

    All bookkeeping happens synchronously between awaits, so a single event
    loop never observes a half-updated counter.
    """

    def __init__(
        self,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.time
    ):
        self.config = config or RateLimitConfig()
        self._clock = clock
        self._windows: Dict[str, WindowState] = {}

        # Statistics
        self._total_requests = 0
        self._total_limited = 0

        self._cleanup_task: Optional[asyncio.Task] = None
        self._running = False

    async def start(self) -> None:
        """Start background cleanup task."""
        if not self._running:
            self._running = True
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info(
                "Rate limiter started",
                max_requests=self.config.max_requests,
                window_seconds=self.config.window_seconds,
            )

    async def stop(self) -> None:
        """Stop background cleanup task."""
        self._running = False
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
        logger.info("Rate limiter stopped")

    def hit(self, client_id: str) -> WindowState:
        """
        Record one request for ``client_id``.

        Returns:
            The client's window after counting this request.

        Raises:
            RateLimitExceeded: If the request does not fit in the window.
        """
        now = self._clock()
        self._total_requests += 1

        window = self._windows.get(client_id)
        if window is None or window.is_expired(now):
            window = WindowState(hits=0, reset_at=now + self.config.window_seconds)
            self._windows[client_id] = window

        window.hits += 1

        if window.hits > self.config.max_requests:
            self._total_limited += 1
            retry_after = max(0.0, window.reset_at - now)
            logger.warning(
                "Rate limit exceeded",
                client=client_id,
                hits=window.hits,
                retry_after=round(retry_after, 2),
            )
            raise RateLimitExceeded(
                self.config.message,
                retry_after=retry_after,
                limit=self.config.max_requests,
                reset_at=window.reset_at,
            )

        return window

    def get_limit_info(self, client_id: str) -> Dict[str, Any]:
        """
        Get rate limit info for client.

        Returns:
            Dict with limit, remaining and reset (epoch seconds) keys
        """
        now = self._clock()
        window = self._windows.get(client_id)
        if window is None or window.is_expired(now):
            hits = 0
            reset_at = now + self.config.window_seconds
        else:
            hits = window.hits
            reset_at = window.reset_at

        return {
            'limit': self.config.max_requests,
            'remaining': max(0, self.config.max_requests - hits),
            'reset': math.ceil(reset_at),
            'window_seconds': self.config.window_seconds,
        }

    def reset_client(self, client_id: str) -> None:
        """Forget the window of a specific client."""
        if self._windows.pop(client_id, None) is not None:
            logger.info("Rate limit reset", client=client_id)

    def reset(self) -> None:
        """Forget every window."""
        self._windows.clear()

    async def _cleanup_loop(self) -> None:
        """Background task to drop expired windows."""
        while self._running:
            try:
                await asyncio.sleep(self.config.cleanup_interval)
                self._cleanup_expired()
            except asyncio.CancelledError:
                break

    def _cleanup_expired(self) -> int:
        now = self._clock()
        expired = [
            client_id
            for client_id, window in self._windows.items()
            if window.is_expired(now)
        ]
        for client_id in expired:
            del self._windows[client_id]

        if expired:
            logger.debug("Cleaned up expired rate limit windows", count=len(expired))
        return len(expired)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get rate limiter statistics.

        Returns:
            Dict with statistics
        """
        return {
            'total_requests': self._total_requests,
            'total_limited': self._total_limited,
            'active_clients': len(self._windows),
            'limit_rate': (
                f"{self._total_limited / self._total_requests * 100:.2f}%"
                if self._total_requests > 0
                else "0%"
            ),
            'config': {
                'max_requests': self.config.max_requests,
                'window_seconds': self.config.window_seconds,
            }
        }
