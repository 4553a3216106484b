"""Appointment and provider models for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Text
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import uuid

from medibook.models.types import UTCDateTime


class AppointmentStatus(str, Enum):
    """Booking status of an appointment."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    MISSED = "MISSED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @staticmethod
    def can_transition(current: "AppointmentStatus", new: "AppointmentStatus") -> bool:
        """Return True if the lifecycle engine itself may move `current` to `new`."""
        return (current, new) in ENGINE_TRANSITIONS


TERMINAL_STATUSES = frozenset({
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.MISSED,
})

# Booking and clinical flows own every other edge.
ENGINE_TRANSITIONS = frozenset({
    (AppointmentStatus.CONFIRMED, AppointmentStatus.MISSED),
})


class Provider(SQLModel, table=True):
    """Care provider (doctor) referenced by appointments."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    name: str = Field(max_length=255)


class Appointment(SQLModel, table=True):
    """Appointment entity tracked through the booking lifecycle."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    patient_id: str = Field(max_length=100, index=True)
    provider_id: str = Field(foreign_key="provider.id", max_length=100, index=True)
    scheduled_at: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False, index=True))
    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING, index=True)

    # Clinical fields, never written by the lifecycle engine
    diagnosis: Optional[str] = Field(default=None, sa_column=Column(Text))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    provider: Optional[Provider] = Relationship()

    @property
    def provider_display_name(self) -> str:
        """Name shown to patients; falls back to the raw provider id."""
        if self.provider is not None and self.provider.name:
            return self.provider.name
        return self.provider_id
