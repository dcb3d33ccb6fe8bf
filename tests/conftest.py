"""
Pytest Configuration and Shared Fixtures

Provides settings, application and client fixtures plus test doubles
shared by unit and integration tests.
"""

import os
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Test environment setup
os.environ["NODE_ENV"] = "test"

from app import create_app
from core.contact import ContactMessage
from config.settings import Settings, reload_settings
from core.contact import Mailer
from data.catalog import Project, ProjectRepository


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that drive the full middleware pipeline over HTTP"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_settings():
    """Reset cached settings after each test."""
    yield
    reload_settings()


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def settings_factory(uploads_dir: Path) -> Callable[..., Settings]:
    """Build test settings; keyword sections override the defaults."""
    def create(
        environment: str = "test",
        security: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> Settings:
        return Settings(
            environment=environment,
            security=security or {},
            storage={"uploads_dir": uploads_dir},
            **kwargs,
        )
    return create


@pytest.fixture
def test_settings(settings_factory) -> Settings:
    return settings_factory()


# =============================================================================
# FastAPI App Fixtures
# =============================================================================

@pytest.fixture
def app_factory(test_settings: Settings) -> Callable[..., FastAPI]:
    """Create apps with injected components; settings default to test_settings."""
    def create(settings: Optional[Settings] = None, **components: Any) -> FastAPI:
        return create_app(settings or test_settings, **components)
    return create


@pytest.fixture
def app(app_factory) -> FastAPI:
    return app_factory()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client driving the app in-process (lifespan not started)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sync_client(app: FastAPI) -> TestClient:
    """Blocking client for code that expects an httpx.Client."""
    return TestClient(app)


# =============================================================================
# Test Doubles
# =============================================================================

class RecordingMailer(Mailer):
    """Keeps sent messages in memory."""

    def __init__(self):
        self.sent: List[ContactMessage] = []

    async def send(self, message: ContactMessage) -> None:
        self.sent.append(message)


class ExplodingProjectRepository(ProjectRepository):
    """Fails on every call."""

    def __init__(self, message: str = "catalog backend unavailable"):
        self.message = message

    async def list_all(self) -> List[Project]:
        raise RuntimeError(self.message)

    async def get(self, project_id: str) -> Optional[Project]:
        raise RuntimeError(self.message)


@pytest.fixture
def exploding_project_repository() -> ExplodingProjectRepository:
    return ExplodingProjectRepository("database on fire")


@pytest.fixture
def recording_mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def contact_payload() -> Dict[str, str]:
    return {
        "name": "Ana Torres",
        "email": "ana@example.com",
        "subject": "Mentoring",
        "message": "Do you offer evening classes?",
    }
