"""
Catalog Repositories - Data access layer for projects and students

@.architecture
Incoming: app.py (construction), api/dependencies.py --- {seed record dicts, repository lookups from endpoints}
Processing: list_all(), get(), count() --- {2 jobs: record_loading, lookup}
Outgoing: api/v1/endpoints/projects.py, api/v1/endpoints/students.py --- {Project / Student model instances}

Endpoints depend only on the abstract interfaces, so a database-backed
implementation can replace the in-memory one without touching handlers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .fixtures import PROJECTS, STUDENTS
from .models import Project, Student


class ProjectRepository(ABC):
    """Read access to projects."""

    @abstractmethod
    async def list_all(self) -> List[Project]:
        """All projects in display order."""

    @abstractmethod
    async def get(self, project_id: str) -> Optional[Project]:
        """A single project, or None."""

    async def count(self) -> int:
        return len(await self.list_all())


class StudentRepository(ABC):
    """Read access to students."""

    @abstractmethod
    async def list_all(self) -> List[Student]:
        """All students in display order."""

    @abstractmethod
    async def get(self, student_id: str) -> Optional[Student]:
        """A single student, or None."""

    async def count(self) -> int:
        return len(await self.list_all())


class InMemoryProjectRepository(ProjectRepository):
    """Projects validated once from literal records and never mutated."""

    def __init__(self, records: Iterable[Dict[str, Any]] = PROJECTS):
        self._projects: Tuple[Project, ...] = tuple(
            Project.model_validate(record) for record in records
        )

    async def list_all(self) -> List[Project]:
        return list(self._projects)

    async def get(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)


class InMemoryStudentRepository(StudentRepository):
    """Students validated once from literal records and never mutated."""

    def __init__(self, records: Iterable[Dict[str, Any]] = STUDENTS):
        self._students: Tuple[Student, ...] = tuple(
            Student.model_validate(record) for record in records
        )

    async def list_all(self) -> List[Student]:
        return list(self._students)

    async def get(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students if s.id == student_id), None)
