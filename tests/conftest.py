"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import Session

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"  # In-memory DB for tests
os.environ.pop("LITE_PUBLIC_HOST", None)

from litepages.database import Database
from litepages.events import EventBus
from litepages.models.account import Account
from litepages.models.lite import LiteEntry
from litepages.models.property import Property
from litepages.models.unit import BookableUnit


@pytest.fixture
def database():
    """Create a fresh in-memory database for each test."""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database: Database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def event_bus():
    """Create a fresh event bus for each test."""
    return EventBus()


@pytest.fixture
def sample_account(db_session: Session) -> Account:
    account = Account(name="Jane Host", business_name="Seaside Stays")
    db_session.add(account)
    db_session.commit()
    return account


@pytest.fixture
def sample_property(db_session: Session, sample_account: Account) -> Property:
    """Create a sample property."""
    prop = Property(
        account_id=sample_account.id,
        name="Seaside Villa",
        short_description="Sunny villa a short walk from the beach.",
        city="Lisbon",
        country="Portugal",
        latitude=38.7223,
        longitude=-9.1393,
        currency="EUR",
        check_in_time="3:00 PM",
        check_out_time="11:00 AM",
        pets_allowed=True,
    )
    db_session.add(prop)
    db_session.commit()
    return prop


@pytest.fixture
def sample_unit(db_session: Session, sample_property: Property) -> BookableUnit:
    unit = BookableUnit(
        property_id=sample_property.id,
        name="Villa",
        display_name='{"en": "Ocean View Villa", "pt": "Villa Vista Mar"}',
        unit_type="villa",
        num_bedrooms=3,
        num_bathrooms=2.0,
        max_guests=6,
        base_price=140.0,
        cleaning_fee=50.0,
    )
    db_session.add(unit)
    db_session.commit()
    return unit


@pytest.fixture
def sample_lite(db_session: Session, sample_unit: BookableUnit, sample_account: Account) -> LiteEntry:
    """A published lite pinned to the sample unit."""
    lite = LiteEntry(
        property_id=sample_unit.property_id,
        unit_id=sample_unit.id,
        account_id=sample_account.id,
        slug="seaside-villa",
    )
    db_session.add(lite)
    db_session.commit()
    return lite
