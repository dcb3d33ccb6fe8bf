"""
Health Check Endpoints

Liveness check and API index.

@.architecture
Incoming: api/v1/router.py, Frontend (HTTP GET), Load Balancers --- {HTTP requests to /api/health, /api}
Processing: health_check(), api_index() --- {2 jobs: health_monitoring, endpoint_listing}
Outgoing: Frontend (HTTP) --- {HealthResponse, WelcomeResponse}
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.dependencies import get_settings
from api.v1.schemas.health import HealthResponse, WelcomeResponse
from config.settings import Settings

router = APIRouter(tags=["health"])

ENDPOINT_DESCRIPTIONS = [
    "GET /api/health - Health check",
    "GET /api/projects - List projects",
    "GET /api/students - List students",
    "POST /api/contact - Send a message",
]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Quick health check endpoint for load balancers and monitoring"
)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="OK",
        message="🌸 SakuraDevClass API is running",
        timestamp=utc_timestamp(),
        environment=settings.environment,
    )


@router.get(
    "",
    response_model=WelcomeResponse,
    summary="API index",
    description="Welcome message, version and the list of public endpoints"
)
async def api_index(settings: Settings = Depends(get_settings)) -> WelcomeResponse:
    return WelcomeResponse(
        message="🌸 Welcome to the SakuraDevClass API",
        version=settings.app_version,
        endpoints=ENDPOINT_DESCRIPTIONS,
    )
