"""Shared pytest fixtures for the API tests."""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeMediaClient, InMemoryRecordStore

ADMIN_USERNAME = "owner"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def admin_env(monkeypatch):
    """Configure the single admin and a test signing secret."""
    monkeypatch.setenv("ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.delenv("ADMIN_PASSWORD_HASH", raising=False)
    monkeypatch.setenv("JWT_SECRET", "test-signing-secret")
    monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MIN", raising=False)
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
    monkeypatch.setenv("CLOUDINARY_FOLDER", "auto_pro_care")


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def media():
    return FakeMediaClient()


@pytest.fixture
def client(store, media):
    """TestClient with the record store and media host replaced by fakes."""
    from listings.dependencies import get_record_store
    from main import app
    from media.dependencies import get_media_client

    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_media_client] = lambda: media
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
