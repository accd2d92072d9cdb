"""
RectSizer Backend: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own record file, store, and FastAPI app, so no
       state leaks between tests and the module-level app is never used.

Fixture Hierarchy (all function-scoped):
    ├── record_path: Temporary path for the durable record (not yet created)
    ├── test_settings: Settings with zero validation delay
    ├── store: Loaded RectangleStore backed by record_path
    ├── test_app: FastAPI app built around `store`
    └── test_client: HTTPX AsyncClient talking to `test_app`
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the import-time module app away from the working directory
os.environ.setdefault("PERSISTENCE_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.schemas.rectangle import RectangleDimensions  # noqa: E402
from app.services.rectangle_store import RectangleStore  # noqa: E402


@pytest.fixture
def record_path(tmp_path):
    """Path of a durable record that does not exist yet."""
    return str(tmp_path / "state" / "rectangle-config.json")


@pytest.fixture
def test_settings(record_path):
    """
    Settings for an isolated app.

    Why delay 0: tests exercising the real wait override this explicitly.
    """
    return Settings(
        _env_file=None,
        persistence_enabled=True,
        rectangle_record_path=record_path,
        default_width=80,
        default_height=100,
        validation_delay_seconds=0,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def store(test_settings):
    """A RectangleStore already loaded from (and having created) its record."""
    rectangle_store = RectangleStore(
        record_path=test_settings.record_path,
        default=RectangleDimensions(
            width=test_settings.default_width,
            height=test_settings.default_height,
        ),
    )
    await rectangle_store.load()
    return rectangle_store


@pytest.fixture
def test_app(test_settings, store):
    return create_app(app_settings=test_settings, store=store)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_get(test_client):
            response = await test_client.get("/api/rectangle")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_app(store):
    """
    Builds an app around `store` with custom settings overrides.

    persistence_enabled is always passed: the environment default set at the
    top of this module would otherwise switch it off.
    """

    def _make(**overrides):
        values = {
            "_env_file": None,
            "persistence_enabled": True,
            "rectangle_record_path": str(store.record_path),
            "validation_delay_seconds": 0,
            "log_level": "WARNING",
        }
        values.update(overrides)
        return create_app(app_settings=Settings(**values), store=store)

    return _make


@pytest.fixture
def make_client(make_app):
    """
    Builds a client for an app with custom settings overrides.

    Usage:
        async with make_client(validation_delay_seconds=0.5) as client:
            ...
    """

    def _make(**overrides):
        app = make_app(**overrides)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _make
