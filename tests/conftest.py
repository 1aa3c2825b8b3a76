import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Configure the app before importing it: in-memory SQLite shared through a
# StaticPool, a throwaway signing secret, the cheapest allowed bcrypt cost and a
# scratch uploads directory.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="tenders-map-uploads-")
os.environ.pop("REGISTRATION_ENABLED", None)
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from tenders_map import models  # noqa: E402,F401
from tenders_map.core.security import hash_password  # noqa: E402
from tenders_map.db.base import Base  # noqa: E402
from tenders_map.db.session import SessionLocal, engine  # noqa: E402
from tenders_map.main import app  # noqa: E402

DEFAULT_PASSWORD = "Secret123!"


@pytest.fixture(autouse=True)
def clean_db():
    """Reset schema for each test for isolation."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def client(clean_db) -> Generator[TestClient, None, None]:
    """FastAPI test client that also triggers startup/shutdown hooks."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user_factory(clean_db):
    """Provision accounts directly in the database, the way an administrator would."""

    def _create_user(email: str, password: str = DEFAULT_PASSWORD) -> models.User:
        with SessionLocal() as db:
            user = models.User(email=email.lower(), password_hash=hash_password(password))
            db.add(user)
            db.commit()
            db.refresh(user)
            db.expunge(user)
            return user

    return _create_user


@pytest.fixture()
def login(client):
    def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict:
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login


@pytest.fixture()
def alice(user_factory, login) -> dict:
    user_factory("alice@example.com")
    return login("alice@example.com")


@pytest.fixture()
def bob(user_factory, login) -> dict:
    user_factory("bob@example.com")
    return login("bob@example.com")


@pytest.fixture()
def uploads_dir() -> str:
    return os.environ["UPLOADS_DIR"]
