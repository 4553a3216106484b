"""Notification model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from datetime import datetime, timezone
from enum import Enum
import uuid


class NotificationKind(str, Enum):
    """Notification categories shared with the wider notification subsystem."""

    APPOINTMENT_REMINDER = "APPOINTMENT_REMINDER"
    REVIEW_PROMPT = "REVIEW_PROMPT"
    NEW_APPOINTMENT = "NEW_APPOINTMENT"
    APPOINTMENT_CONFIRMATION = "APPOINTMENT_CONFIRMATION"
    APPOINTMENT_CANCELLATION = "APPOINTMENT_CANCELLATION"
    PRESCRIPTION_REMINDER = "PRESCRIPTION_REMINDER"
    HEALTH_REPORT = "HEALTH_REPORT"
    GENERAL = "GENERAL"


class Notification(SQLModel, table=True):
    """Notification entity addressed to a patient about an appointment."""

    __table_args__ = (
        UniqueConstraint("related_entity_id", "kind", name="uq_notification_related_kind"),
    )

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    recipient_id: str = Field(max_length=100, index=True)
    kind: NotificationKind
    title: str = Field(max_length=200)
    message: str = Field(max_length=1000)
    related_entity_id: str = Field(max_length=100, index=True)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def dedup_key(self) -> tuple:
        return (self.related_entity_id, self.kind)
