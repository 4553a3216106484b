"""Router exposing the lifecycle batch jobs to an external trigger."""
from fastapi import APIRouter, Depends

from medibook.config import settings
from medibook.dapr.client import event_publisher
from medibook.db.config import get_engine
from medibook.schemas.scheduled_task import ScheduledTask, ScheduledTaskRequest, ScheduledTaskResponse
from medibook.services.lifecycle_engine import LifecycleEngine
from medibook.utils.metrics import metrics_collector

router = APIRouter(tags=["Scheduled Tasks"])  # No prefix since main.py adds /api prefix


def get_lifecycle_engine() -> LifecycleEngine:
    """Dependency for getting a LifecycleEngine backed by the configured database."""
    return LifecycleEngine.from_engine(get_engine(), settings=settings, publisher=event_publisher)


@router.post("/tasks", response_model=ScheduledTaskResponse)
def run_scheduled_task(
    request: ScheduledTaskRequest,
    engine: LifecycleEngine = Depends(get_lifecycle_engine),
):
    """Run one batch job. Per-appointment failures are reported in `result.failures`."""
    if request.task == ScheduledTask.SEND_APPOINTMENT_REMINDERS:
        result = engine.dispatch_reminders()
    elif request.task == ScheduledTask.SEND_REVIEW_REMINDERS:
        result = engine.dispatch_review_prompts()
    else:
        result = engine.sweep_missed_appointments()

    return ScheduledTaskResponse(task=request.task, result=result)


@router.get("/tasks/metrics")
def get_task_metrics():
    """Counters and timers accumulated by batch runs in this process."""
    return metrics_collector.get_metrics()
