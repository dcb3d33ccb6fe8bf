"""
Catalog Schemas

List envelopes for projects and students.

@.architecture
Incoming: api/v1/endpoints/projects.py, api/v1/endpoints/students.py --- {List[Project], List[Student]}
Processing: Pydantic validation and serialization --- {2 jobs: count_derivation, serialization}
Outgoing: Frontend (HTTP) --- {ProjectListResponse, StudentListResponse}
"""

from typing import List

from pydantic import BaseModel

from data.catalog import Project, Student


class ProjectListResponse(BaseModel):
    success: bool = True
    data: List[Project]
    count: int

    @classmethod
    def of(cls, projects: List[Project]) -> "ProjectListResponse":
        return cls(data=projects, count=len(projects))


class StudentListResponse(BaseModel):
    success: bool = True
    data: List[Student]
    count: int

    @classmethod
    def of(cls, students: List[Student]) -> "StudentListResponse":
        return cls(data=students, count=len(students))
