import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_COLORS", "false")
os.environ.setdefault("LOCKOUT_MAX_FAILED_ATTEMPTS", "3")
os.environ.setdefault("LOCKOUT_MINUTES", "5")

import pytest

from infrastructure.database import SessionLocal, create_db_and_tables, drop_db_and_tables


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test"""
    create_db_and_tables()
    yield
    drop_db_and_tables()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
