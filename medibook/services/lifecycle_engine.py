"""
Appointment Lifecycle Engine.

The three batch entry points invoked by an external trigger. Each one derives
its window from the injected clock on every call and returns a BatchResult.
"""

from typing import Optional

from sqlalchemy.engine import Engine

from medibook.config import EngineSettings
from medibook.dapr.client import DaprEventPublisher
from medibook.repositories.base import AppointmentRepository, NotificationRepository
from medibook.repositories.sql import SQLAppointmentRepository, SQLNotificationRepository
from medibook.schemas.batch import BatchResult
from medibook.services.batch_runner import BatchRunner
from medibook.services.clock import Clock, SystemClock
from medibook.services.missed_appointment_sweeper import MissedAppointmentSweeper
from medibook.services.reminder_dispatcher import ReminderDispatcher
from medibook.services.review_prompt_dispatcher import ReviewPromptDispatcher
from medibook.utils.metrics import MetricsCollector, metrics_collector


class LifecycleEngine:
    """Entry points for reminder dispatch, review prompts and the missed sweep."""

    def __init__(
        self,
        appointments: AppointmentRepository,
        notifications: NotificationRepository,
        clock: Optional[Clock] = None,
        settings: Optional[EngineSettings] = None,
        publisher: Optional[DaprEventPublisher] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the engine.

        Args:
            appointments: Appointment store
            notifications: Notification store
            clock: Time source, system UTC clock by default
            settings: Window sizes, timezone and worker count
            publisher: Lifecycle event publisher, logging-only by default
            metrics: Metrics collector, the global one by default
        """
        self.settings = settings or EngineSettings()
        self.clock = clock or SystemClock()
        self.metrics = metrics or metrics_collector
        self.publisher = publisher or DaprEventPublisher(
            enabled=self.settings.events_enabled,
            pubsub_name=self.settings.pubsub_name,
        )

        common = dict(clock=self.clock, publisher=self.publisher, metrics=self.metrics)
        workers = self.settings.batch_max_workers

        self.reminders = ReminderDispatcher(
            appointments,
            notifications,
            runner=BatchRunner(ReminderDispatcher.name, max_workers=workers, metrics=self.metrics),
            lookahead=self.settings.reminder_lookahead,
            tz=self.settings.tz,
            **common,
        )
        self.review_prompts = ReviewPromptDispatcher(
            appointments,
            notifications,
            runner=BatchRunner(ReviewPromptDispatcher.name, max_workers=workers, metrics=self.metrics),
            tz=self.settings.tz,
            **common,
        )
        self.missed_sweeper = MissedAppointmentSweeper(
            appointments,
            runner=BatchRunner(MissedAppointmentSweeper.name, max_workers=workers, metrics=self.metrics),
            **common,
        )

    @classmethod
    def from_engine(cls, engine: Engine, settings: Optional[EngineSettings] = None, **kwargs) -> "LifecycleEngine":
        """Build an engine backed by the SQLModel stores."""
        return cls(
            SQLAppointmentRepository(engine),
            SQLNotificationRepository(engine),
            settings=settings,
            **kwargs,
        )

    def dispatch_reminders(self) -> BatchResult:
        """Create one reminder per confirmed appointment due within the lookahead window."""
        with_timer = self.metrics.time_operation("dispatch_reminders_seconds")
        return with_timer(self.reminders.run)()

    def dispatch_review_prompts(self) -> BatchResult:
        """Create one review prompt per appointment completed on the previous calendar day."""
        with_timer = self.metrics.time_operation("dispatch_review_prompts_seconds")
        return with_timer(self.review_prompts.run)()

    def sweep_missed_appointments(self) -> BatchResult:
        """Mark confirmed appointments whose time has passed as missed."""
        with_timer = self.metrics.time_operation("sweep_missed_appointments_seconds")
        return with_timer(self.missed_sweeper.run)()
