"""Missed-Appointment Sweeper: move confirmed appointments whose time has passed to Missed."""
from datetime import datetime
from typing import List

from medibook.models.appointment import Appointment, AppointmentStatus
from medibook.services.batch_runner import Outcome
from medibook.services.dispatcher import Dispatcher
from medibook.services.errors import ContractViolationError


class MissedAppointmentSweeper(Dispatcher):
    """Applies the single engine-owned transition, Confirmed -> Missed."""

    name = "missed-appointments"

    def fetch(self, now: datetime) -> List[Appointment]:
        return self.appointments.find_past(AppointmentStatus.CONFIRMED, before=now)

    def process(self, appointment: Appointment, now: datetime) -> Outcome:
        if not appointment.scheduled_at < now:
            raise ContractViolationError(
                f"Appointment {appointment.id} scheduled at {appointment.scheduled_at.isoformat()} is not in the past"
            )
        status = AppointmentStatus(appointment.status)
        if status.is_terminal:
            # Moved on after the query ran; the engine never leaves a terminal state
            self.log.info("Appointment already terminal", appointment_id=appointment.id, status=status.value)
            return Outcome.SKIPPED
        if not AppointmentStatus.can_transition(status, AppointmentStatus.MISSED):
            raise ContractViolationError(
                f"Appointment {appointment.id} has status {status.value}, "
                f"expected {AppointmentStatus.CONFIRMED.value}"
            )

        # Guarded write: a concurrent cancel/complete must win
        changed = self.appointments.compare_and_set_status(
            appointment.id, AppointmentStatus.CONFIRMED, AppointmentStatus.MISSED
        )
        if not changed:
            self.log.info("Appointment already left Confirmed", appointment_id=appointment.id)
            return Outcome.SKIPPED

        self.metrics.appointment_missed()
        self.publish(self.publisher.publish_appointment_missed, {
            "appointment_id": appointment.id,
            "patient_id": appointment.patient_id,
            "provider_id": appointment.provider_id,
            "scheduled_at": appointment.scheduled_at.isoformat(),
        })
        return Outcome.APPLIED
