"""Shared fixtures: a throwaway SQLite database per test."""

import os
import sys
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.mkdtemp(prefix='parking-tests-'), 'app.db')}",
)
os.environ.setdefault("OTP_DELIVERY", "log")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import create_tables
from app.models.mall import Mall
from app.models.parking_slot import ParkingSlot, SlotStatus
from app.models.user import User


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'parking.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    create_tables(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mall(db):
    """One mall with three free slots and two users (ids 1 and 2)."""
    mall = Mall(name="City Centre Mall", location="MG Road")
    db.add(mall)
    db.flush()
    db.add_all([
        ParkingSlot(mall_id=mall.id, slot_number=f"S-{n:03d}", status=SlotStatus.FREE.value)
        for n in range(1, 4)
    ])
    db.add_all([
        User(name="Asha", email="a@x.com", password_hash="x", created_at=datetime.utcnow()),
        User(name="Ravi", email="r@x.com", password_hash="x", created_at=datetime.utcnow()),
    ])
    db.commit()
    return mall


@pytest.fixture
def slot_ids(db, mall):
    return [s.id for s in db.query(ParkingSlot).filter(ParkingSlot.mall_id == mall.id).order_by(ParkingSlot.id)]
