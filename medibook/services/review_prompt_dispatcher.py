"""Review-Prompt Dispatcher: ask for a review of appointments completed on the previous day."""
from datetime import datetime, time, timedelta
from typing import List, Tuple

import pytz

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind
from medibook.services.dispatcher import NotificationDispatcher

REVIEW_TITLE = "How was your appointment?"


def previous_day_window(now: datetime, tz) -> Tuple[datetime, datetime]:
    """
    Return [yesterday 00:00, today 00:00) in `tz`, as UTC instants.

    Args:
        now: Current timezone-aware instant
        tz: pytz timezone defining the calendar day

    Returns:
        (start, end) tuple; start inclusive, end exclusive
    """
    today = now.astimezone(tz).date()
    today_start = tz.localize(datetime.combine(today, time.min))
    yesterday_start = tz.localize(datetime.combine(today - timedelta(days=1), time.min))
    return yesterday_start.astimezone(pytz.utc), today_start.astimezone(pytz.utc)


class ReviewPromptDispatcher(NotificationDispatcher):
    """Ensures each appointment completed yesterday has one review prompt."""

    name = "review-prompts"
    kind = NotificationKind.REVIEW_PROMPT
    expected_status = AppointmentStatus.COMPLETED

    def __init__(self, *args, tz=pytz.utc, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = tz

    def fetch(self, now: datetime) -> List[Appointment]:
        start, end = previous_day_window(now, self.tz)
        # Half-open so a record never matches two consecutive daily runs
        return self.appointments.find_by_window(AppointmentStatus.COMPLETED, start, end, end_inclusive=False)

    def in_window(self, scheduled_at: datetime, now: datetime) -> bool:
        start, end = previous_day_window(now, self.tz)
        return start <= scheduled_at < end

    def build_notification(self, appointment: Appointment) -> Notification:
        return Notification(
            recipient_id=appointment.patient_id,
            kind=self.kind,
            title=REVIEW_TITLE,
            message=(
                f"Thank you for visiting Dr. {appointment.provider_display_name}. "
                f"Please take a moment to leave a review."
            ),
            related_entity_id=appointment.id,
        )

    def on_created(self, notification: Notification):
        self.metrics.review_prompt_created()
