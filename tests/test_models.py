"""Tests for appointment status rules and the notification dedup key."""
import pytest

from medibook.models.appointment import Appointment, AppointmentStatus, Provider
from medibook.models.notification import Notification, NotificationKind


@pytest.mark.parametrize("status, terminal", [
    (AppointmentStatus.PENDING, False),
    (AppointmentStatus.CONFIRMED, False),
    (AppointmentStatus.COMPLETED, True),
    (AppointmentStatus.CANCELLED, True),
    (AppointmentStatus.MISSED, True),
])
def test_terminal_statuses(status, terminal):
    assert status.is_terminal is terminal


def test_engine_only_moves_confirmed_to_missed():
    allowed = [
        (current, new)
        for current in AppointmentStatus
        for new in AppointmentStatus
        if AppointmentStatus.can_transition(current, new)
    ]

    assert allowed == [(AppointmentStatus.CONFIRMED, AppointmentStatus.MISSED)]


def test_provider_display_name(clock):
    with_provider = Appointment(
        patient_id="p", provider_id="doc-1", scheduled_at=clock.now(),
        provider=Provider(id="doc-1", name="Sarah Khan"),
    )
    without_provider = Appointment(patient_id="p", provider_id="doc-2", scheduled_at=clock.now())

    assert with_provider.provider_display_name == "Sarah Khan"
    assert without_provider.provider_display_name == "doc-2"


def test_notification_dedup_key():
    notification = Notification(
        recipient_id="patient-1",
        kind=NotificationKind.REVIEW_PROMPT,
        title="t",
        message="m",
        related_entity_id="appt-1",
    )

    assert notification.dedup_key == ("appt-1", NotificationKind.REVIEW_PROMPT)
    assert notification.is_read is False
