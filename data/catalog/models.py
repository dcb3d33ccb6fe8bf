"""
Catalog Models - Pydantic models for projects and students

Wire names follow the frontend contract (``_id``, ``sakuraPoints``, ...)
through aliases; Python code uses snake_case attributes.

@.architecture
Incoming: data/catalog/fixtures.py, data/catalog/repositories.py --- {literal record dicts}
Processing: Pydantic validation and serialization --- {2 jobs: data_validation, serialization}
Outgoing: data/catalog/repositories.py, api/v1/schemas/*.py --- {Project, Student, StudentRef, Skill frozen models}
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    """Difficulty / level labels."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class CatalogModel(BaseModel):
    """Immutable base; accepts both field names and wire aliases."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class StudentRef(CatalogModel):
    """Student summary embedded in a project."""
    id: str = Field(alias="_id")
    name: str
    avatar: str


class Skill(CatalogModel):
    """A named skill with a proficiency level from 1 to 5."""
    name: str
    level: int = Field(ge=1, le=5)


class Project(CatalogModel):
    """A class project."""
    id: str = Field(alias="_id")
    title: str
    description: str
    technologies: List[str]
    difficulty: Difficulty
    season: str
    status: str
    featured: bool = False
    sakura_points: int = Field(alias="sakuraPoints", ge=0)
    students: List[StudentRef] = Field(default_factory=list)


class Student(CatalogModel):
    """A student profile."""
    id: str = Field(alias="_id")
    name: str
    email: str
    avatar: str
    bio: str
    current_level: Difficulty = Field(alias="currentLevel")
    total_sakura_points: int = Field(alias="totalSakuraPoints", ge=0)
    skills: List[Skill] = Field(default_factory=list)
