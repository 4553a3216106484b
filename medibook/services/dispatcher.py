"""
Dispatcher base classes.

A dispatcher computes its candidate query from the clock on every run, hands
the candidates to a BatchRunner and never lets an exception escape `run()`.
"""

import abc
from datetime import datetime
from typing import Callable, List, Optional

from medibook.dapr.client import DaprEventPublisher
from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind
from medibook.repositories.base import AppointmentRepository, NotificationRepository
from medibook.schemas.batch import BatchResult
from medibook.services.batch_runner import BatchRunner, Outcome
from medibook.services.clock import Clock
from medibook.services.errors import ContractViolationError, DuplicateNotificationError
from medibook.utils.logger import get_logger
from medibook.utils.metrics import MetricsCollector, metrics_collector

logger = get_logger(__name__)


class Dispatcher(abc.ABC):
    """Fetch candidates for `now`, then process each one in isolation."""

    name: str = "dispatcher"

    def __init__(
        self,
        appointments: AppointmentRepository,
        clock: Clock,
        runner: Optional[BatchRunner] = None,
        publisher: Optional[DaprEventPublisher] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.appointments = appointments
        self.clock = clock
        self.metrics = metrics or metrics_collector
        self.runner = runner or BatchRunner(self.name, metrics=self.metrics)
        self.publisher = publisher or DaprEventPublisher(enabled=False)
        self.log = logger.bind(batch=self.name)

    @abc.abstractmethod
    def fetch(self, now: datetime) -> List[Appointment]:
        """Query the candidates eligible at `now`."""

    @abc.abstractmethod
    def process(self, appointment: Appointment, now: datetime) -> Outcome:
        """Bring one candidate to its desired end state."""

    def run(self) -> BatchResult:
        """Execute one batch run. Failures are reported in the result, never raised."""
        try:
            now = self.clock.now()
            candidates = self.fetch(now)
        except Exception as e:
            self.log.exception("Candidate query failed", error=str(e))
            self.metrics.dispatch_failed()
            return BatchResult.fetch_failed(e)

        return self.runner.run(candidates, lambda appointment: self.process(appointment, now))

    def publish(self, send: Callable[[dict], dict], data: dict):
        """Announce a committed change; the store write stands even if this fails."""
        try:
            send(data)
        except Exception as e:
            self.log.error("Failed to publish lifecycle event", error=str(e), data=data)


class NotificationDispatcher(Dispatcher):
    """Dispatcher that ensures exactly one notification of `kind` per candidate."""

    kind: NotificationKind
    expected_status: AppointmentStatus

    def __init__(self, appointments: AppointmentRepository, notifications: NotificationRepository, clock: Clock, **kwargs):
        super().__init__(appointments, clock, **kwargs)
        self.notifications = notifications

    @abc.abstractmethod
    def in_window(self, scheduled_at: datetime, now: datetime) -> bool:
        """Whether `scheduled_at` lies inside this run's query window."""

    @abc.abstractmethod
    def build_notification(self, appointment: Appointment) -> Notification:
        """Construct the notification for a candidate."""

    def on_created(self, notification: Notification):
        """Hook for per-kind counters."""

    def process(self, appointment: Appointment, now: datetime) -> Outcome:
        self.check_candidate(appointment, now)

        if self.notifications.exists_for(appointment.id, self.kind):
            return Outcome.SKIPPED

        notification = self.build_notification(appointment)
        try:
            created = self.notifications.create(notification)
        except DuplicateNotificationError:
            # Another run created it between our check and write
            return Outcome.SKIPPED

        self.on_created(created)
        self.publish(self.publisher.publish_notification_created, {
            "notification_id": created.id,
            "recipient_id": created.recipient_id,
            "kind": created.kind.value,
            "related_entity_id": created.related_entity_id,
            "title": created.title,
        })
        return Outcome.APPLIED

    def check_candidate(self, appointment: Appointment, now: datetime):
        if appointment.status != self.expected_status:
            raise ContractViolationError(
                f"Appointment {appointment.id} has status {AppointmentStatus(appointment.status).value}, expected {self.expected_status.value}"
            )
        if not self.in_window(appointment.scheduled_at, now):
            raise ContractViolationError(
                f"Appointment {appointment.id} scheduled at {appointment.scheduled_at.isoformat()} is outside the {self.name} window"
            )
