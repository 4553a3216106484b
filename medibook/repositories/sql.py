"""SQLModel-backed stores. Each call opens its own session, so worker threads can share one instance."""
import logging
from datetime import datetime
from typing import List

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.models.notification import Notification, NotificationKind
from medibook.repositories.base import AppointmentRepository, NotificationRepository
from medibook.services.errors import DuplicateNotificationError, StoreError

logger = logging.getLogger(__name__)


class SQLAppointmentRepository(AppointmentRepository):
    """Appointment store on a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def find_by_window(
        self,
        status: AppointmentStatus,
        start: datetime,
        end: datetime,
        end_inclusive: bool = True,
    ) -> List[Appointment]:
        upper = Appointment.scheduled_at <= end if end_inclusive else Appointment.scheduled_at < end
        statement = (
            select(Appointment)
            .options(selectinload(Appointment.provider))
            .where(Appointment.status == status, Appointment.scheduled_at >= start, upper)
            .order_by(Appointment.scheduled_at)
        )
        return self._fetch(statement)

    def find_past(self, status: AppointmentStatus, before: datetime) -> List[Appointment]:
        statement = (
            select(Appointment)
            .options(selectinload(Appointment.provider))
            .where(Appointment.status == status, Appointment.scheduled_at < before)
            .order_by(Appointment.scheduled_at)
        )
        return self._fetch(statement)

    def compare_and_set_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> bool:
        statement = (
            update(Appointment)
            .where(Appointment.id == appointment_id, Appointment.status == expected)
            .values(status=new)
        )
        try:
            with Session(self.engine) as session:
                changed = session.connection().execute(statement).rowcount == 1
                session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update status of appointment {appointment_id}: {e}") from e
        return changed

    def _fetch(self, statement) -> List[Appointment]:
        try:
            with Session(self.engine) as session:
                appointments = list(session.exec(statement).all())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query appointments: {e}") from e
        return appointments


class SQLNotificationRepository(NotificationRepository):
    """Notification store relying on the (related_entity_id, kind) unique constraint."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def exists_for(self, appointment_id: str, kind: NotificationKind) -> bool:
        statement = select(Notification.id).where(
            Notification.related_entity_id == appointment_id,
            Notification.kind == kind,
        ).limit(1)
        try:
            with Session(self.engine) as session:
                return session.exec(statement).first() is not None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up notifications for {appointment_id}: {e}") from e

    def create(self, notification: Notification) -> Notification:
        try:
            with Session(self.engine) as session:
                session.add(notification)
                session.commit()
                session.refresh(notification)
        except IntegrityError as e:
            logger.info(
                f"Notification {notification.kind.value} for {notification.related_entity_id} "
                f"was created concurrently"
            )
            raise DuplicateNotificationError(notification.related_entity_id, notification.kind) from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create notification for {notification.related_entity_id}: {e}") from e
        return notification
