# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import os

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_AUTO_MIGRATE"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-pytest"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_db
from app.core.security import create_user_token
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.main import app
from app.models.user import User
from tests.factories import make_user


@pytest.fixture(scope="session")
def test_engine():
    """In-memory SQLite shared by every connection of the test session"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture(scope="function")
def test_db(test_engine):
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=test_engine)
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def test_client(test_db: Session):
    """TestClient whose requests share the test session"""

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(test_db: Session) -> User:
    return make_user(test_db, "testuser", "test@example.com")


@pytest.fixture
def test_token(test_user: User) -> str:
    return create_user_token(test_user)


@pytest.fixture
def other_user(test_db: Session) -> User:
    return make_user(test_db, "otheruser", "other@example.com")


@pytest.fixture
def other_token(other_user: User) -> str:
    return create_user_token(other_user)


@pytest.fixture
def auth_headers(test_token: str) -> dict:
    return {"Authorization": f"Bearer {test_token}"}
