"""
Student Endpoints

@.architecture
Incoming: api/v1/router.py, Frontend (HTTP GET) --- {HTTP requests to /api/students}
Processing: list_students() --- {1 job: catalog_listing}
Outgoing: data/catalog/repositories.py, Frontend (HTTP) --- {StudentRepository.list_all() call, StudentListResponse}
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_student_repository
from api.v1.schemas.catalog import StudentListResponse
from data.catalog import StudentRepository

router = APIRouter(tags=["students"])


@router.get(
    "/students",
    response_model=StudentListResponse,
    summary="List students",
)
async def list_students(
    repository: StudentRepository = Depends(get_student_repository),
) -> StudentListResponse:
    return StudentListResponse.of(await repository.list_all())
