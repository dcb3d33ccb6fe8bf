"""
Catalog - projects and students served by the API
"""

from .models import Difficulty, Project, Skill, Student, StudentRef
from .repositories import (
    InMemoryProjectRepository,
    InMemoryStudentRepository,
    ProjectRepository,
    StudentRepository,
)

__all__ = [
    "Difficulty",
    "Project",
    "Skill",
    "Student",
    "StudentRef",
    "ProjectRepository",
    "StudentRepository",
    "InMemoryProjectRepository",
    "InMemoryStudentRepository",
]
