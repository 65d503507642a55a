"""
Test configuration and fixtures for the link shortener.
This centralizes all test setup, making individual tests clean.

Settings are read at import time, so the environment is prepared before
anything from the app is imported. A lowercase-only hash id alphabet
makes hash ids their own canonical form, which lets tests build custom
hashes that collide with generated ids.
"""

import os

os.environ["BASE_URL"] = "https://sho.rt"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["HASHID_ALPHABET"] = "abcdefghijklmnopqrstuvwxyz"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from hashlink_app.cache.strategies import InMemoryCache
from hashlink_app.database.connection import Base, enable_sqlite_foreign_keys, get_db
from hashlink_app.dependencies import get_cache
from hashlink_app.services.hashid_codec import get_hashid_codec

# One in-memory database shared by every connection in a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def codec():
    return get_hashid_codec()


@pytest.fixture(scope="function")
def client(db_session, cache):
    """
    Create a test client with database and cache dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
