"""
FastAPI Application Factory

Creates and configures the FastAPI application with:
- Middleware pipeline (security headers, compression, request context,
  rate limiting, CORS, body limits, error handling)
- API routes and the /uploads static mount
- Route-not-found fallback
- Lifecycle management (startup banner, rate limiter cleanup, fatal error hook)

@.architecture
Incoming: main.py, config/settings.py, api/v1/router.py, api/middleware/*.py, data/catalog, core/contact --- {Settings object, APIRouter instance, middleware constructors, repositories, mailer}
Processing: create_app(), lifespan(), not_found_handler(), exit_on_unhandled_error() --- {6 jobs: application_creation, middleware_registration, routing_registration, dependency_wiring, lifecycle_management, fatal_error_handling}
Outgoing: main.py, Frontend (HTTP) --- {FastAPI application instance, HTTP responses}
"""

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.middleware import (
    RequestContextMiddleware,
    create_error_handler_middleware,
    create_rate_limiter_middleware,
    create_security_headers_middleware,
)
from api.v1.router import api_v1_router
from api.v1.schemas.common import ErrorResponse, NotFoundResponse
from config.settings import Settings, get_settings
from core.contact import LogMailer, Mailer
from data.catalog import (
    InMemoryProjectRepository,
    InMemoryStudentRepository,
    ProjectRepository,
    StudentRepository,
)
from monitoring import configure_from_preset, get_logger
from security.rate_limit import RateLimitConfig, RateLimiter

logger = get_logger(__name__)

# Responses of at least this many bytes are gzip-compressed
COMPRESSION_MINIMUM_SIZE = 1024


# =============================================================================
# Fatal Error Hook
# =============================================================================

def exit_on_unhandled_error(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """
    Event loop exception handler.

    An exception nobody awaited (a failed fire-and-forget task, a crashed
    callback) terminates the process immediately with exit code 1. Contexts
    without an exception go to the default handler.
    """
    error = context.get("exception")
    if error is None:
        loop.default_exception_handler(context)
        return

    logger.critical(
        f"Unhandled error: {error}",
        exc_info=error,
        context=context.get("message"),
    )
    os._exit(1)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    *,
    rate_limiter: Optional[RateLimiter] = None,
    project_repository: Optional[ProjectRepository] = None,
    student_repository: Optional[StudentRepository] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Every stateful component is created here (or passed in) and owned by the
    returned application; nothing is kept in module globals.

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    configure_from_preset(settings.logging_preset, **settings.monitoring.preset_overrides())

    logger.info(f"Creating {settings.app_name} application (environment: {settings.environment})")

    if rate_limiter is None:
        rate_limiter = RateLimiter(
            RateLimitConfig(
                max_requests=settings.security.rate_limit_max_requests,
                window_seconds=settings.security.rate_limit_window_seconds,
            )
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan.

        Startup: fatal error hook, rate limiter cleanup, banner.
        Shutdown: stop rate limiter cleanup.
        """
        asyncio.get_running_loop().set_exception_handler(exit_on_unhandled_error)

        if settings.security.rate_limit_enabled:
            await rate_limiter.start()

        port = settings.security.bind_port
        logger.info("🌸" * 20)
        logger.info(f"🌸 {settings.app_name} server running")
        logger.info(f"🌸 Port: {port}")
        logger.info(f"🌸 Environment: {settings.environment}")
        logger.info(f"🌸 Health Check: {settings.base_url}/api/health")
        logger.info("🌸" * 20)

        yield

        logger.info("=== Application Shutdown ===")
        await rate_limiter.stop()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="SakuraDevClass backend: projects, students and contact form",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        redirect_slashes=False,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.rate_limiter = rate_limiter
    app.state.project_repository = project_repository or InMemoryProjectRepository()
    app.state.student_repository = student_repository or InMemoryStudentRepository()
    app.state.mailer = mailer or LogMailer()

    # ==========================================================================
    # Middleware Configuration
    # ==========================================================================
    # add_middleware() wraps everything added before it, so registration
    # runs from the innermost stage to the outermost one.

    # Error handler: directly around the router
    middleware_class, middleware_kwargs = create_error_handler_middleware(
        development=settings.is_development
    )
    app.add_middleware(middleware_class, **middleware_kwargs)

    # CORS: one trusted origin, credentials allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    if settings.security.rate_limit_enabled:
        middleware_class, middleware_kwargs = create_rate_limiter_middleware(
            rate_limiter,
            path_prefix=settings.security.rate_limit_path_prefix,
        )
        app.add_middleware(middleware_class, **middleware_kwargs)

    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(GZipMiddleware, minimum_size=COMPRESSION_MINIMUM_SIZE)

    # Security headers: outermost, so every response carries them
    middleware_class, middleware_kwargs = create_security_headers_middleware()
    app.add_middleware(middleware_class, **middleware_kwargs)

    # ==========================================================================
    # Routes
    # ==========================================================================

    app.include_router(api_v1_router)

    uploads_dir = settings.storage.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.storage.uploads_mount_path,
        StaticFiles(directory=str(uploads_dir)),
        name="uploads",
    )

    # ==========================================================================
    # Route-not-found Fallback
    # ==========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        """
        Unknown paths, unsupported methods on known paths and missing upload
        files all answer with the route-not-found body.
        """
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content=NotFoundResponse().model_dump())

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=str(exc.detail)).model_dump(exclude_none=True),
            headers=getattr(exc, "headers", None),
        )

    return app
