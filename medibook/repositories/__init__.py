"""Appointment and notification stores used by the lifecycle engine."""

from .base import AppointmentRepository, NotificationRepository
from .memory import InMemoryAppointmentRepository, InMemoryNotificationRepository
from .sql import SQLAppointmentRepository, SQLNotificationRepository

__all__ = [
    "AppointmentRepository",
    "NotificationRepository",
    "InMemoryAppointmentRepository",
    "InMemoryNotificationRepository",
    "SQLAppointmentRepository",
    "SQLNotificationRepository",
]
