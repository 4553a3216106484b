"""Reminder Dispatcher: one reminder per confirmed appointment in the next lookahead window."""
from datetime import datetime, timedelta
from typing import List

import pytz

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind
from medibook.services.dispatcher import NotificationDispatcher

REMINDER_TITLE = "Appointment Reminder"


class ReminderDispatcher(NotificationDispatcher):
    """Ensures each confirmed appointment within [now, now + lookahead] has one reminder."""

    name = "appointment-reminders"
    kind = NotificationKind.APPOINTMENT_REMINDER
    expected_status = AppointmentStatus.CONFIRMED

    def __init__(self, *args, lookahead: timedelta = timedelta(hours=24), tz=pytz.utc, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookahead = lookahead
        self.tz = tz

    def fetch(self, now: datetime) -> List[Appointment]:
        return self.appointments.find_by_window(
            AppointmentStatus.CONFIRMED, now, now + self.lookahead, end_inclusive=True
        )

    def in_window(self, scheduled_at: datetime, now: datetime) -> bool:
        return now <= scheduled_at <= now + self.lookahead

    def build_notification(self, appointment: Appointment) -> Notification:
        local = appointment.scheduled_at.astimezone(self.tz)
        message = (
            f"You have an appointment with Dr. {appointment.provider_display_name} "
            f"on {local.strftime('%A, %B %d')} at {local.strftime('%I:%M %p')}. Please be on time."
        )
        return Notification(
            recipient_id=appointment.patient_id,
            kind=self.kind,
            title=REMINDER_TITLE,
            message=message,
            related_entity_id=appointment.id,
        )

    def on_created(self, notification: Notification):
        self.metrics.reminder_created()
