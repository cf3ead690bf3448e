"""Pytest configuration and fixtures."""

import os

# Must be set before the application modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("TIMEZONE", "Europe/Dublin")

import pytest
from datetime import timedelta
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kitchen_compliance.db.base import Base, utcnow
from kitchen_compliance.db.session import get_db
from kitchen_compliance.main import app
# Import all models to ensure they're registered with Base.metadata
from kitchen_compliance.models import Fridge, FridgeTempLog

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

SITE_ID = "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11"
OTHER_SITE_ID = "b1ffcd00-0d1c-4ef8-bb6d-6bb9bd380b22"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def demo_client() -> Generator[TestClient, None, None]:
    """Test client with no database configured (demo mode)."""
    def override_get_db():
        yield None

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_fridge(db: Session, site_id: str = SITE_ID, name: str = "Walk-in", **kwargs) -> Fridge:
    fridge = Fridge(
        site_id=site_id,
        name=name,
        sort_order=kwargs.pop("sort_order", 0),
        min_temp=kwargs.pop("min_temp", 0.0),
        max_temp=kwargs.pop("max_temp", 5.0),
        active=kwargs.pop("active", True),
        **kwargs,
    )
    db.add(fridge)
    db.commit()
    db.refresh(fridge)
    return fridge


def make_log(db: Session, fridge: Fridge, temperature: float = 3.0, age: timedelta = timedelta(0)) -> FridgeTempLog:
    log = FridgeTempLog(
        site_id=fridge.site_id,
        fridge_id=fridge.id,
        temperature=temperature,
        is_compliant=fridge.min_temp <= temperature <= fridge.max_temp,
        created_at=utcnow() - age,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


@pytest.fixture
def test_fridge(db_session: Session) -> Fridge:
    """Create an active fridge with the default 0-5C band."""
    return make_fridge(db_session, name="Main Fridge")


@pytest.fixture
def fridge_factory(db_session: Session):
    """Create fridges directly in the test database."""
    def _create(**kwargs) -> Fridge:
        return make_fridge(db_session, **kwargs)
    return _create


@pytest.fixture
def log_factory(db_session: Session):
    """Create temperature logs directly, optionally backdated by ``age``."""
    def _create(fridge: Fridge, temperature: float = 3.0, age: timedelta = timedelta(0)) -> FridgeTempLog:
        return make_log(db_session, fridge, temperature=temperature, age=age)
    return _create


@pytest.fixture
def site_id() -> str:
    return SITE_ID


@pytest.fixture
def other_site_id() -> str:
    return OTHER_SITE_ID
