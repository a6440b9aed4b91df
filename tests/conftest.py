import os

# Settings are read at import time; keep tests off real AWS and disk
os.environ.setdefault("AWS_BUCKET_NAME", "test-uploads")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from file_service.core.database import Base, get_db
from file_service.models import uploaded_file  # noqa: F401
from file_service.services.multipart import MultipartSessionManager, get_session_manager
from tests.fakes import FakeS3

URL_EXPIRATION = 3 * 60 * 60


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def manager(fake_s3):
    return MultipartSessionManager(s3=fake_s3, url_expiration=URL_EXPIRATION)


@pytest.fixture
def app(manager, session_factory):
    from file_service.main import app as fastapi_app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_session_manager] = lambda: manager
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def api_client(app):
    return TestClient(app)
