"""Shared fixtures for lifecycle engine tests."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from medibook.config import EngineSettings
from medibook.db.config import build_engine
from medibook.db.init import init_db
from medibook.models.appointment import Appointment, AppointmentStatus, Provider
from medibook.repositories.memory import InMemoryAppointmentRepository, InMemoryNotificationRepository
from medibook.services.clock import FixedClock
from medibook.services.lifecycle_engine import LifecycleEngine
from medibook.utils.metrics import MetricsCollector

NOW = datetime(2026, 10, 18, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def provider():
    return Provider(id="doc-1", name="Sarah Khan")


@pytest.fixture
def make_appointment(provider):
    """Factory for appointments relative to NOW."""
    counter = {"n": 0}

    def _make(offset: timedelta, status: AppointmentStatus = AppointmentStatus.CONFIRMED, **kwargs) -> Appointment:
        counter["n"] += 1
        kwargs.setdefault("id", f"appt-{counter['n']}")
        kwargs.setdefault("patient_id", f"patient-{counter['n']}")
        kwargs.setdefault("provider_id", provider.id)
        kwargs.setdefault("provider", provider)
        return Appointment(scheduled_at=NOW + offset, status=status, **kwargs)

    return _make


@pytest.fixture
def appointments():
    return InMemoryAppointmentRepository()


@pytest.fixture
def notifications():
    return InMemoryNotificationRepository()


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def engine(appointments, notifications, clock, settings, metrics):
    """Lifecycle engine over in-memory stores and a frozen clock."""
    return LifecycleEngine(appointments, notifications, clock=clock, settings=settings, metrics=metrics)


@pytest.fixture
def db_engine():
    """SQLite in-memory database shared across threads."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()
