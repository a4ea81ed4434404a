"""Test configuration and fixtures for graphiform."""

import os

import pytest
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from graphiform import SchemaContext
from tests.models import Base

# Try to load environment variables from .env file
load_dotenv()


@pytest.fixture(scope="function")
def engine():
    """Create a test database engine for each test function."""
    test_db_url = os.getenv('GRAPHIFORM_TEST_DATABASE_URL')
    if test_db_url:
        engine = create_engine(test_db_url, future=True)
        # Ensure a clean slate before tests
        Base.metadata.drop_all(engine)
    else:
        # Shared in-memory SQLite across connections
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    Base.metadata.create_all(engine)
    yield engine
    if test_db_url:
        Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Create a new database session for each test function."""
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture(scope="function")
def context():
    """Fresh schema context (and registry) per test."""
    return SchemaContext()


# Import fixtures from fixtures module
from tests.fixtures import populated_db  # noqa: E402,F401
