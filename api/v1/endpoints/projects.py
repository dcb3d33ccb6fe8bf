"""
Project Endpoints

@.architecture
Incoming: api/v1/router.py, Frontend (HTTP GET) --- {HTTP requests to /api/projects}
Processing: list_projects() --- {1 job: catalog_listing}
Outgoing: data/catalog/repositories.py, Frontend (HTTP) --- {ProjectRepository.list_all() call, ProjectListResponse}
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_project_repository
from api.v1.schemas.catalog import ProjectListResponse
from data.catalog import ProjectRepository

router = APIRouter(tags=["projects"])


@router.get(
    "/projects",
    response_model=ProjectListResponse,
    summary="List projects",
)
async def list_projects(
    repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectListResponse:
    """All projects with their participating students."""
    return ProjectListResponse.of(await repository.list_all())
