import os

import pytest
from app.api.deps import get_blob_store
from app.core.security import hash_password
from app.crud.books import BookStore
from app.crud.notes import NoteStore
from app.crud.users import UserStore
from app.db.session import get_db
from app.main import app
from app.models import Base
from app.schemas.users import UserCreate
from app.storage.blob_store import LocalBlobStore
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture()
def engine():
    # Override at runtime: DATABASE_URL=... pytest
    url = os.getenv("DATABASE_URL")
    if url:
        eng = create_engine(url, pool_pre_ping=True)
    else:
        # Default to in-memory SQLite so tests run without external services.
        eng = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # For speed, create tables directly in tests instead of running alembic.
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture()
def client(db_session, blob_store):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session):
    return UserStore(db_session)


@pytest.fixture()
def books(db_session):
    return BookStore(db_session)


@pytest.fixture()
def notes(db_session):
    return NoteStore(db_session)


@pytest.fixture()
def make_user(users):
    def _make(email: str, *, role: str = "user", password: str = "secret123", name: str = "Reader"):
        return users.create(
            UserCreate(email=email, name=name, password_hash=hash_password(password), role=role)
        )

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user("admin@example.com", role="admin", name="Admin")


@pytest.fixture()
def admin_headers(admin):
    return {"X-User-Id": str(admin.id)}
