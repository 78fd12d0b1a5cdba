"""
Pytest configuration and fixtures.

Every test gets its own SQLite database file and storage directory under
tmp_path, selected through environment variables before settings load.
"""

import pytest
from fastapi.testclient import TestClient

from internhub.core.config import get_settings
from internhub.db.session import dispose_engine, init_schema
from tests.helpers import signup


@pytest.fixture
def settings_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'internhub_test.db'}")
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("APPLICATION_STATUS_POLICY", "lenient")
    get_settings.cache_clear()
    dispose_engine()
    yield
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def db(settings_env):
    """Schema only, for service-level tests that skip the HTTP layer."""
    init_schema()


@pytest.fixture
def client(settings_env):
    from internhub.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def student(client):
    return signup(client, "student", "student@internhub.io", "Ada Student")


@pytest.fixture
def company(client):
    return signup(client, "company", "hr@acme.io", "Acme Corp")
