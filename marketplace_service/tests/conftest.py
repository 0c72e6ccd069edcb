"""
Pytest configuration and fixtures for marketplace service tests.
"""

import asyncio
import os
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

# Set up test environment variables before importing anything else
os.environ.setdefault("APP_NAME", "Marketplace Service Test")
os.environ.setdefault("APP_VERSION", "1.0.0")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SERVICE_NAME", "marketplace-service")
os.environ.setdefault(
    "MARKETPLACE_DATABASE_URL", "sqlite+aiosqlite:///./test_marketplace.db"
)
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
os.environ.setdefault("AUTH_COOKIE_NAME", "token")
os.environ.setdefault("AUTH_COOKIE_SECURE", "false")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-secret")
os.environ.setdefault("CORS_ORIGINS", '["http://localhost:5173"]')
os.environ.setdefault("CORS_CREDENTIALS", "true")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("ENABLE_ACCESS_LOGS", "false")

from marketplace_service.app.api.dependencies import get_image_storage  # noqa: E402
from marketplace_service.app.core.database import database_manager  # noqa: E402
from marketplace_service.app.main import app  # noqa: E402

SUPERADMIN = {
    "name": "Root Admin",
    "email": "root@example.com",
    "password": "rootpass123",
}
ADMIN = {
    "name": "Staff Admin",
    "email": "staff@example.com",
    "password": "staffpass123",
    "role": "admin",
}


class FakeImageStorage:
    """Records uploads and deletions instead of calling the image host"""

    def __init__(self) -> None:
        self.uploaded: List[str] = []
        self.deleted: List[str] = []

    async def upload_image(self, file: Any, folder: Any) -> str:
        await file.read()
        stem = (file.filename or "image").rsplit(".", 1)[0]
        url = (
            "https://res.cloudinary.com/test-cloud/image/upload/"
            f"v{len(self.uploaded) + 1}/{folder.name}/{stem}.jpg"
        )
        self.uploaded.append(url)
        return url

    async def delete_image(self, url: Optional[str]) -> bool:
        if not url:
            return False
        self.deleted.append(url)
        return True


def _reset_database() -> None:
    async def reset() -> None:
        await database_manager.drop_tables()
        await database_manager.create_tables()

    asyncio.run(reset())


@pytest.fixture(scope="session", autouse=True)
def cleanup_database_file():
    yield
    asyncio.run(database_manager.close())
    try:
        os.remove("test_marketplace.db")
    except FileNotFoundError:
        pass


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def client(image_storage: FakeImageStorage):
    """FastAPI test client on an empty database."""
    _reset_database()
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client: TestClient, email: str, password: str) -> Dict[str, Any]:
    response = client.post(
        "/api/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
def superadmin_client(client: TestClient) -> TestClient:
    """Client logged in as the superadmin created through first-run setup."""
    response = client.post("/api/auth/setup", json=SUPERADMIN)
    assert response.status_code == 201, response.text
    login(client, SUPERADMIN["email"], SUPERADMIN["password"])
    return client


@pytest.fixture
def admin_client(superadmin_client: TestClient) -> TestClient:
    """A separate client logged in as a plain admin."""
    response = superadmin_client.post("/api/admins", json=ADMIN)
    assert response.status_code == 201, response.text

    staff = TestClient(app)
    login(staff, ADMIN["email"], ADMIN["password"])
    return staff
