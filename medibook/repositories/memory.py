"""In-memory stores for tests and local development."""
import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind
from medibook.repositories.base import AppointmentRepository, NotificationRepository
from medibook.services.errors import DuplicateNotificationError, StoreError


class InMemoryAppointmentRepository(AppointmentRepository):
    """Appointment store backed by a dict; status writes are atomic under a lock."""

    def __init__(self, appointments: Optional[Iterable[Appointment]] = None):
        self._lock = threading.Lock()
        self._rows: Dict[str, Appointment] = {}
        for appointment in appointments or []:
            self.add(appointment)

    def add(self, appointment: Appointment) -> Appointment:
        if appointment.scheduled_at.tzinfo is None:
            raise StoreError(f"Appointment {appointment.id} has a naive scheduled_at")
        with self._lock:
            self._rows[appointment.id] = appointment
        return appointment

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            return self._rows.get(appointment_id)

    def set_status(self, appointment_id: str, status: AppointmentStatus):
        """Unconditional write, standing in for external booking flows."""
        with self._lock:
            self._rows[appointment_id].status = status

    def find_by_window(
        self,
        status: AppointmentStatus,
        start: datetime,
        end: datetime,
        end_inclusive: bool = True,
    ) -> List[Appointment]:
        with self._lock:
            rows = list(self._rows.values())
        matches = [
            a for a in rows
            if a.status == status
            and a.scheduled_at >= start
            and (a.scheduled_at <= end if end_inclusive else a.scheduled_at < end)
        ]
        return sorted(matches, key=lambda a: a.scheduled_at)

    def find_past(self, status: AppointmentStatus, before: datetime) -> List[Appointment]:
        with self._lock:
            rows = list(self._rows.values())
        matches = [a for a in rows if a.status == status and a.scheduled_at < before]
        return sorted(matches, key=lambda a: a.scheduled_at)

    def compare_and_set_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> bool:
        with self._lock:
            appointment = self._rows.get(appointment_id)
            if appointment is None or appointment.status != expected:
                return False
            appointment.status = new
            return True


class InMemoryNotificationRepository(NotificationRepository):
    """Notification store keyed by (related entity, kind)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: Dict[tuple, Notification] = {}

    def exists_for(self, appointment_id: str, kind: NotificationKind) -> bool:
        with self._lock:
            return (appointment_id, kind) in self._rows

    def create(self, notification: Notification) -> Notification:
        with self._lock:
            if notification.dedup_key in self._rows:
                raise DuplicateNotificationError(notification.related_entity_id, notification.kind)
            self._rows[notification.dedup_key] = notification
        return notification

    def all(self) -> List[Notification]:
        with self._lock:
            return list(self._rows.values())

    def for_kind(self, kind: NotificationKind) -> List[Notification]:
        return [n for n in self.all() if n.kind == kind]
