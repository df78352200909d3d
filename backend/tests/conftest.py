"""Shared test fixtures for Repo Insights backend."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from api.deps import settings_dependency
from app.config import Environment, Settings
from app.main import create_app


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment=Environment.TESTING,
        debug=True,
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
async def app(test_settings):
    """Create a test application running on test settings."""
    application = create_app()
    application.dependency_overrides[settings_dependency] = lambda: test_settings
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator:
    """Provide an async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def scenario_repos() -> list[dict]:
    """Three-repository scan: a Go API server, a React web app and a fork."""
    return [
        {
            "name": "api-server",
            "language": "Go",
            "languages": {"Go": 80000},
            "stars": 10,
            "has_readme": True,
            "readme_size": 600,
            "total_commits": 20,
            "important_files": ["LICENSE"],
        },
        {
            "name": "web-app",
            "language": "JavaScript",
            "languages": {"JavaScript": 120000},
            "stars": 5,
            "topics": ["react"],
        },
        {
            "name": "old-fork",
            "language": "Python",
            "is_fork": True,
            "user_contributions": 3,
        },
    ]
