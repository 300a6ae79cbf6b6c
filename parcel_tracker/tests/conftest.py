"""
Centralized Test Configuration.
"""

import random

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from parcel_tracker.app.db.session import init_db, drop_db
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.schemas.parcel import Parcel, utc_timestamp
from parcel_tracker.app.services.parcel_store import ParcelStore

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """In-memory engine shared by every session of a test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def setup_database(engine):
    """Create tables before each test function and drop after."""
    init_db(engine)
    yield
    drop_db(engine)


@pytest.fixture
def store(engine):
    return ParcelStore(engine)


@pytest.fixture
def rng():
    """Locally seeded generator for client ids."""
    return random.Random(20240101)


@pytest.fixture
def make_parcel():
    """Factory for a fresh registered test parcel."""
    def _make_parcel(**overrides):
        data = {
            "client": 1000,
            "status": ParcelStatus.REGISTERED,
            "address": "test",
            "created_at": utc_timestamp(),
        }
        data.update(overrides)
        return Parcel(**data)
    return _make_parcel
