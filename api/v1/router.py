"""
API V1 Router

Aggregates all v1 endpoint routers under the /api prefix.

@.architecture
Incoming: app.py, api/v1/endpoints/*.py --- {app.include_router() call, 4 endpoint router instances}
Processing: api_v1_router.include_router() for 4 endpoints --- {1 job: router_aggregation}
Outgoing: app.py, api/v1/endpoints/*.py --- {APIRouter with /api routes, HTTP request routing to endpoints}
"""

from fastapi import APIRouter

from .endpoints import (
    health_router,
    projects_router,
    students_router,
    contact_router,
)

API_PREFIX = "/api"

api_v1_router = APIRouter()

# Health and API index (index lives at the bare prefix)
api_v1_router.include_router(health_router, prefix=API_PREFIX)

# Catalog
api_v1_router.include_router(projects_router, prefix=API_PREFIX)
api_v1_router.include_router(students_router, prefix=API_PREFIX)

# Contact form
api_v1_router.include_router(contact_router, prefix=API_PREFIX)
