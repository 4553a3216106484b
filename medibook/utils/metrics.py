"""
Metrics Collection for the lifecycle engine.

Counts notifications created, appointments marked missed and batch outcomes.
"""

import time
from typing import Dict, Any, Callable
from collections import defaultdict
from datetime import datetime, timezone
import functools
import threading


class MetricsCollector:
    """Collects and manages dispatch metrics."""

    def __init__(self):
        """Initialize metrics collector."""
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()

        # Initialize counters
        self.metrics["batch_runs_total"] = 0
        self.metrics["reminders_created_total"] = 0
        self.metrics["review_prompts_created_total"] = 0
        self.metrics["appointments_missed_total"] = 0
        self.metrics["dispatch_noops_total"] = 0
        self.metrics["dispatch_failures_total"] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Record a timing metric."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    def reset(self):
        with self.lock:
            for name in list(self.metrics):
                self.metrics[name] = 0
            self.timers.clear()

    def batch_run(self):
        self.increment_counter("batch_runs_total")

    def reminder_created(self):
        """Record that a reminder notification was created."""
        self.increment_counter("reminders_created_total")

    def review_prompt_created(self):
        """Record that a review prompt notification was created."""
        self.increment_counter("review_prompts_created_total")

    def appointment_missed(self):
        """Record a Confirmed -> Missed transition."""
        self.increment_counter("appointments_missed_total")

    def dispatch_noop(self):
        self.increment_counter("dispatch_noops_total")

    def dispatch_failed(self):
        """Record a candidate whose processing failed."""
        self.increment_counter("dispatch_failures_total")

    def time_operation(self, metric_name: str) -> Callable:
        """Decorator recording the wall time of each call under `metric_name`."""
        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    self.record_timer(metric_name, time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics_collector = MetricsCollector()
