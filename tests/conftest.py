"""
Shared fixtures: an in-memory stand-in for the MongoDB connector, a file
store rooted in tmp_path, and an HTTP client with both wired in.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.dependencies import get_file_store, get_notice_repository
from app.services.file_store import FileStore
from app.services.notice_repository import NoticeRepository
from tests.fakes import FakeConnector


@pytest.fixture
def fake_connector():
    return FakeConnector()


@pytest.fixture
def repository(fake_connector):
    return NoticeRepository(fake_connector, "notices")


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def file_store(upload_dir):
    return FileStore(str(upload_dir), "/uploads")


@pytest.fixture
def client(repository, file_store):
    app.dependency_overrides[get_notice_repository] = lambda: repository
    app.dependency_overrides[get_file_store] = lambda: file_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
