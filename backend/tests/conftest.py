"""
Shared test configuration.

The environment is prepared before any ``app`` module is imported, because
settings are read once at import time.
"""

import os
import tempfile

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-workspace-tests")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("TRAINING_STEPS", "3")
os.environ.setdefault("TRAINING_STEP_SECONDS", "0")
os.environ.setdefault("REPLY_DELAY_SECONDS", "0")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="workspace-uploads-"))
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from app.db.session import create_all, dispose_engine, init_engine  # noqa: E402


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as API integration test (TestClient + SQLite)"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark all tests in integration/ as integration tests."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def database_url(tmp_path) -> str:
    """A fresh SQLite file per test; separate connections see each other's commits."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def db_engine(database_url):
    """Engine with all tables created, for tests that talk to services directly."""
    engine = init_engine(database_url)
    await create_all()
    yield engine
    await dispose_engine()
