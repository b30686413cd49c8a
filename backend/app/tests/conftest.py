"""
Shared fixtures: a throwaway SQLite database and upload directory.

The environment is set before any app module is imported so that the
settings object and the engine pick up the temporary locations.
"""
import os
import shutil
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="diary-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'diary_test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from app.core.config import settings  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine, init_db  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema():
    init_db()
    yield
    engine.dispose()
    shutil.rmtree(_TMP_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def _clean_state():
    # Safety: only ever wipe the temporary database and upload directory
    assert settings.DATABASE_URL.endswith("diary_test.db"), "Refusing to clean non-temp DB"
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    shutil.rmtree(settings.UPLOAD_DIR, ignore_errors=True)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def png_bytes():
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
