import os
import shutil
import tempfile

# Settings are read at import time, so point them at scratch space first.
_TMP_ROOT = tempfile.mkdtemp(prefix="blogcms-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_ROOT, 'import.db')}"
os.environ["UPLOAD_FOLDER"] = os.path.join(_TMP_ROOT, "uploads")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEFAULT_ADMIN_USERNAME"] = "admin"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "admin123"
os.environ["DEFAULT_ADMIN_EMAIL"] = "admin@example.com"
os.environ["DEFAULT_AUTHOR"] = "Admin"
os.environ["TIME_ZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from blogcms.core import database
from blogcms.core.services.upload_service import upload_service
from blogcms.main import app


def _clear_uploads():
    if os.path.isdir(upload_service.upload_dir):
        for name in os.listdir(upload_service.upload_dir):
            os.remove(os.path.join(upload_service.upload_dir, name))


@pytest.fixture
def client(tmp_path, monkeypatch):
    engine = database.build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    monkeypatch.setattr(database, "engine", engine)
    _clear_uploads()
    with TestClient(app) as test_client:
        yield test_client
    _clear_uploads()


@pytest.fixture
def token(client):
    response = client.post(
        "/api/auth/login", json={"username": "admin", "password": "admin123"}
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_post(client, auth_headers):
    def _make(**overrides):
        payload = {
            "title": "Hello world",
            "excerpt": "A short summary",
            "content": "The body of the post",
            "category": "General",
        }
        payload.update(overrides)
        response = client.post("/api/blogs", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def uploaded_files():
    """Callable listing the files currently in the upload area."""

    def _list():
        if not os.path.isdir(upload_service.upload_dir):
            return []
        return sorted(os.listdir(upload_service.upload_dir))

    return _list


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TMP_ROOT, ignore_errors=True)
