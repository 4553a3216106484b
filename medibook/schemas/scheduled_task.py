"""Schemas for the scheduled task trigger endpoint."""
from pydantic import BaseModel
from enum import Enum

from medibook.schemas.batch import BatchResult


class ScheduledTask(str, Enum):
    """Batch jobs an operator or scheduler can trigger."""
    SEND_APPOINTMENT_REMINDERS = "SEND_APPOINTMENT_REMINDERS"
    SEND_REVIEW_REMINDERS = "SEND_REVIEW_REMINDERS"
    UPDATE_MISSED_APPOINTMENTS = "UPDATE_MISSED_APPOINTMENTS"


class ScheduledTaskRequest(BaseModel):
    """Body of POST /api/tasks."""
    task: ScheduledTask


class ScheduledTaskResponse(BaseModel):
    """Which task ran and its batch outcome."""
    task: ScheduledTask
    result: BatchResult
