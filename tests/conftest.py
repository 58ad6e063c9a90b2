"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all DoseMinder tests.
Fixtures include database sessions, test clients, engine entities and sample data.
"""

import os
import sys
from datetime import datetime, date, timedelta
from typing import Generator, Dict, Any, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep the application engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from database import Base, build_engine, get_db
from models import Medicine, DoseRecord, MedicineStatus, MedicineType, DoseRecordStatus
from dosing import (
    Medicine as MedicineEntity,
    DoseRecord as DoseRecordEntity,
)
from app import app


TEST_USER_ID = "user-1"

# Friday, midday
FIXED_NOW = datetime(2024, 3, 15, 12, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Fresh in-memory SQLite engine with foreign keys enforced"""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== CLOCK FIXTURES ====================

@pytest.fixture
def now() -> datetime:
    """Fixed current moment: Friday 2024-03-15 12:00"""
    return FIXED_NOW


@pytest.fixture
def today(now: datetime) -> date:
    return now.date()


# ==================== ENGINE ENTITY FIXTURES ====================

@pytest.fixture
def make_medicine():
    """Factory for engine Medicine entities"""
    def _make(
        id: str = "m1",
        times: List[str] = None,
        name: str = "Metformin",
        dosage: str = "500mg",
        status: MedicineStatus = MedicineStatus.ACTIVE
    ) -> MedicineEntity:
        return MedicineEntity(
            id=id,
            name=name,
            dosage=dosage,
            times=list(times) if times is not None else ["08:00", "20:00"],
            status=status
        )
    return _make


@pytest.fixture
def make_record():
    """Factory for engine DoseRecord entities"""
    def _make(
        medicine_id: str = "m1",
        scheduled_date: date = FIXED_NOW.date(),
        scheduled_time: str = "08:00",
        status: DoseRecordStatus = DoseRecordStatus.TAKEN,
        taken_at: datetime = None
    ) -> DoseRecordEntity:
        if status == DoseRecordStatus.TAKEN and taken_at is None:
            taken_at = datetime.combine(scheduled_date, datetime.min.time()).replace(hour=8, minute=5)
        return DoseRecordEntity(
            medicine_id=medicine_id,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            status=status,
            taken_at=taken_at
        )
    return _make


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_medicine_data() -> Dict[str, Any]:
    """Sample medicine data for creating test medicines"""
    return {
        "user_id": TEST_USER_ID,
        "name": "Metformin",
        "generic_name": "metformin hydrochloride",
        "dosage": "500mg",
        "type": MedicineType.TABLET,
        "color": "#4F46E5",
        "times": ["08:00", "20:00"],
        "frequency": "2x daily",
        "instructions": "Take with meals",
        "status": MedicineStatus.ACTIVE,
        "start_date": FIXED_NOW.date() - timedelta(days=30)
    }


@pytest.fixture
def test_medicine(db_session: Session, sample_medicine_data: Dict) -> Medicine:
    """Create and return a twice-daily test medicine"""
    medicine = Medicine(**sample_medicine_data)
    db_session.add(medicine)
    db_session.commit()
    db_session.refresh(medicine)
    return medicine


@pytest.fixture
def as_needed_medicine(db_session: Session) -> Medicine:
    """Create and return a medicine without scheduled times"""
    medicine = Medicine(
        user_id=TEST_USER_ID,
        name="Ibuprofen",
        dosage="200mg",
        type=MedicineType.TABLET,
        times=[],
        status=MedicineStatus.ACTIVE
    )
    db_session.add(medicine)
    db_session.commit()
    db_session.refresh(medicine)
    return medicine


@pytest.fixture
def paused_medicine(db_session: Session) -> Medicine:
    """Create and return a paused medicine"""
    medicine = Medicine(
        user_id=TEST_USER_ID,
        name="Vitamin D",
        dosage="1000IU",
        type=MedicineType.CAPSULE,
        times=["09:00"],
        status=MedicineStatus.PAUSED
    )
    db_session.add(medicine)
    db_session.commit()
    db_session.refresh(medicine)
    return medicine


@pytest.fixture
def dose_history(db_session: Session, test_medicine: Medicine) -> List[DoseRecord]:
    """
    Morning dose records for the five days before FIXED_NOW

    Oldest first: taken, missed, taken, taken, taken.
    """
    pattern = [
        DoseRecordStatus.TAKEN,
        DoseRecordStatus.MISSED,
        DoseRecordStatus.TAKEN,
        DoseRecordStatus.TAKEN,
        DoseRecordStatus.TAKEN,
    ]

    records = []
    for i, record_status in enumerate(pattern):
        day = FIXED_NOW.date() - timedelta(days=len(pattern) - i)
        record = DoseRecord(
            medicine_id=test_medicine.id,
            user_id=TEST_USER_ID,
            scheduled_date=day,
            scheduled_time="08:00",
            status=record_status,
            taken_at=datetime.combine(day, datetime.min.time()).replace(hour=8, minute=10)
            if record_status == DoseRecordStatus.TAKEN else None
        )
        db_session.add(record)
        records.append(record)

    db_session.commit()
    for record in records:
        db_session.refresh(record)

    return records
