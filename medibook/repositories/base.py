"""
Store capabilities consumed by the lifecycle engine.

Concrete stores: SQLModel (`repositories.sql`) and in-memory (`repositories.memory`).
"""

import abc
from datetime import datetime
from typing import List

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind


class AppointmentRepository(abc.ABC):
    """Reads appointments by time window and applies guarded status writes."""

    @abc.abstractmethod
    def find_by_window(
        self,
        status: AppointmentStatus,
        start: datetime,
        end: datetime,
        end_inclusive: bool = True,
    ) -> List[Appointment]:
        """
        Find appointments in `status` scheduled within a time window.

        Args:
            status: Status the appointments must currently have
            start: Inclusive lower bound on scheduled_at
            end: Upper bound on scheduled_at
            end_inclusive: Whether `end` itself matches

        Returns:
            Matching appointments with their provider loaded
        """

    @abc.abstractmethod
    def find_past(self, status: AppointmentStatus, before: datetime) -> List[Appointment]:
        """Find appointments in `status` scheduled strictly before `before`."""

    @abc.abstractmethod
    def compare_and_set_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> bool:
        """
        Set the status to `new` only if it is currently `expected`.

        Returns:
            True if the row changed, False if the stored status differed
        """


class NotificationRepository(abc.ABC):
    """Creates notifications and answers deduplication lookups."""

    @abc.abstractmethod
    def exists_for(self, appointment_id: str, kind: NotificationKind) -> bool:
        """Return True if a notification of `kind` exists for the appointment."""

    @abc.abstractmethod
    def create(self, notification: Notification) -> Notification:
        """
        Persist a notification.

        Raises:
            DuplicateNotificationError: the (related entity, kind) pair is taken
            StoreError: the write failed
        """
