"""Shared fixtures: an in-memory SQLite store and a TestClient over the real app.

Settings are read at import time, so the environment is prepared before any
``flixauth`` module is imported.
"""
import os

os.environ["FLIXAUTH_DATABASE_URL"] = "sqlite://"
os.environ["FLIXAUTH_JWT_SECRET_KEY"] = "testing-secret-0123456789-abcdefghij"
os.environ["FLIXAUTH_BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from flixauth.core.db import Base, SessionLocal, engine  # noqa: E402
from flixauth.main import app  # noqa: E402

SECRET = "testing-secret-0123456789-abcdefghij"


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def auth_service():
    return app.state.auth_service


@pytest.fixture
def alice():
    return {"userId": "u1", "username": "alice", "email": "a@x.com", "password": "secret1"}
