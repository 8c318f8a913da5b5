"""Shared fixtures: per-test SQLite database, fake cloud storage, API helpers."""

import os
import tempfile
import uuid
from pathlib import Path
from typing import Callable

# Settings are read once at import time; configure them before qrbites loads.
_TMP_DIR = tempfile.mkdtemp(prefix="qrbites-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/bootstrap.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["API_URL"] = "http://api.test"
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from qrbites.core.rate_limit import reset_rate_limits
from qrbites.domain.models.user import User
from qrbites.infrastructure.cache import get_cache
from qrbites.infrastructure.cloudinary_api import StorageError, get_storage
from qrbites.infrastructure.database import build_engine, get_db, init_db
from qrbites.main import app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FakeStorage:
    """In-memory stand-in for the Cloudinary client."""

    def __init__(self):
        self.uploads: list[str] = []
        self.destroyed: list[str] = []
        self.failing_folders: set[str] = set()

    @property
    def is_configured(self) -> bool:
        return True

    async def upload(self, content: bytes, folder: str, public_id: str = None, filename: str = "upload") -> dict:
        if folder in self.failing_folders:
            raise StorageError("Cloud storage upload failed")
        full_id = f"qrbites/{folder}/{public_id or uuid.uuid4().hex}"
        self.uploads.append(full_id)
        return {
            "public_id": full_id,
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1/{full_id}.png",
        }

    async def destroy(self, public_id: str) -> dict:
        self.destroyed.append(public_id)
        return {"result": "ok"}

    async def destroy_url(self, url: str) -> bool:
        public_id = url.split("/upload/v1/")[-1].rsplit(".", 1)[0] if url else None
        if not public_id:
            return False
        await self.destroy(public_id)
        return True


@pytest.fixture
def engine(tmp_path: Path) -> Engine:
    db_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    get_cache().clear()
    reset_rate_limits()
    yield
    get_cache().clear()
    reset_rate_limits()


@pytest.fixture
def client(session_factory, storage: FakeStorage) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    """Register a user; returns the auth payload plus ready-made headers."""

    def _register(email: str = None, password: str = "secret123", name: str = "Test User") -> dict:
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data

    return _register


@pytest.fixture
def make_admin(register, session_factory) -> Callable[..., dict]:
    def _make_admin(email: str = None) -> dict:
        data = register(email=email, name="Admin User")
        with session_factory() as db:
            user = db.get(User, data["id"])
            user.role = "admin"
            db.commit()
        data["role"] = "admin"
        return data

    return _make_admin


def opening_hours() -> list[dict]:
    hours = [{"day": day, "closed": False, "open": "09:00", "close": "22:00"} for day in range(6)]
    hours.append({"day": 6, "closed": True})
    return hours


@pytest.fixture
def restaurant_payload() -> Callable[..., dict]:
    def _payload(**overrides) -> dict:
        payload = {
            "name": "Trattoria Roma",
            "description": "Neapolitan pizza and fresh pasta",
            "location": {"street": "Hauptstrasse", "houseNumber": "12a", "city": "Berlin", "zipCode": "10115"},
            "contact": {"phone": "+4915112345678", "email": "info@roma.example.com"},
            "hours": opening_hours(),
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_restaurant(client: TestClient, restaurant_payload) -> Callable[..., dict]:
    def _create(headers: dict, **overrides) -> dict:
        response = client.post("/api/restaurants", json=restaurant_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_menu(client: TestClient) -> Callable[..., dict]:
    def _create(headers: dict, restaurant_id: int, **overrides) -> dict:
        payload = {"name": "Dinner Menu", "restaurantId": restaurant_id, **overrides}
        response = client.post("/api/menus", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_menu_item(client: TestClient) -> Callable[..., dict]:
    def _create(headers: dict, menu_id: int, **overrides) -> dict:
        payload = {"name": "Margherita", "price": 9.5, "category": "Pizza", "menuId": menu_id, **overrides}
        response = client.post("/api/menu-items", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
