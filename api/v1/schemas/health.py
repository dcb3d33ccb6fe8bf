"""
Health Check Schemas

Pydantic models for the health and welcome endpoints.

@.architecture
Incoming: api/v1/endpoints/health.py --- {status, timestamp, environment, endpoint list}
Processing: Pydantic validation and serialization --- {2 jobs: data_validation, serialization}
Outgoing: api/v1/endpoints/health.py --- {HealthResponse, WelcomeResponse validated models}
"""

from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness response."""
    status: str = "OK"
    message: str
    timestamp: str = Field(description="ISO-8601 UTC timestamp")
    environment: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "OK",
                "message": "🌸 SakuraDevClass API is running",
                "timestamp": "2024-11-04T12:00:00.000Z",
                "environment": "development",
            }
        }
    }


class WelcomeResponse(BaseModel):
    """API index."""
    message: str
    version: str
    endpoints: List[str]
