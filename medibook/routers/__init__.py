"""Routers package for the MediBook lifecycle engine."""

from .scheduled_tasks import router as scheduled_tasks_router

__all__ = ["scheduled_tasks_router"]
