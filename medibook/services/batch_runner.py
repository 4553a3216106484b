"""
Batch Runner.

Shared skeleton for the lifecycle entry points: process each candidate
independently, isolate per-candidate failures and aggregate a BatchResult.
"""

from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

from medibook.schemas.batch import BatchFailure, BatchResult
from medibook.services.errors import ContractViolationError, StoreError
from medibook.utils.logger import get_logger
from medibook.utils.metrics import MetricsCollector, metrics_collector

logger = get_logger(__name__)

T = TypeVar("T")


class Outcome(str, Enum):
    """Result of processing one candidate successfully."""
    APPLIED = "applied"
    SKIPPED = "skipped"


def _default_key(candidate: Any) -> Optional[str]:
    return getattr(candidate, "id", None)


class BatchRunner:
    """Runs a process function over candidates with per-candidate failure isolation."""

    def __init__(self, name: str, max_workers: int = 1, metrics: Optional[MetricsCollector] = None):
        """
        Initialize the runner.

        Args:
            name: Batch name used in logs
            max_workers: Thread pool size; 1 processes candidates sequentially
            metrics: Collector for noop/failure counters
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.name = name
        self.max_workers = max_workers
        self.metrics = metrics or metrics_collector
        self.log = logger.bind(batch=name)

    def run(
        self,
        candidates: Iterable[T],
        process: Callable[[T], Outcome],
        key: Callable[[T], Optional[str]] = _default_key,
    ) -> BatchResult:
        """
        Process every candidate and aggregate the outcome.

        Args:
            candidates: Already-fetched candidates
            process: Handles one candidate; raising marks only that candidate failed
            key: Extracts the candidate id reported in failures

        Returns:
            BatchResult with attempted/succeeded counts and failures in candidate order
        """
        candidates = list(candidates)
        self.metrics.batch_run()
        self.log.info("Batch started", candidates=len(candidates), workers=self.max_workers)

        def handle(candidate: T) -> Union[Outcome, BatchFailure]:
            return self._process_one(candidate, process, key)

        if self.max_workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix=self.name) as pool:
                outcomes: List[Union[Outcome, BatchFailure]] = list(pool.map(handle, candidates))
        else:
            outcomes = [handle(candidate) for candidate in candidates]

        result = BatchResult(attempted=len(candidates))
        for outcome in outcomes:
            if isinstance(outcome, BatchFailure):
                result.failures.append(outcome)
            elif outcome is Outcome.APPLIED:
                result.applied += 1
            else:
                result.skipped += 1
        result.succeeded = result.applied + result.skipped

        finish = self.log.warning if result.failures else self.log.info
        finish(
            "Batch finished",
            attempted=result.attempted,
            applied=result.applied,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    def _process_one(
        self,
        candidate: T,
        process: Callable[[T], Outcome],
        key: Callable[[T], Optional[str]],
    ) -> Union[Outcome, BatchFailure]:
        candidate_id = key(candidate)
        try:
            outcome = Outcome(process(candidate))
        except ContractViolationError as e:
            self.log.error(
                "Candidate violates query contract",
                candidate_id=candidate_id,
                candidate=repr(candidate),
                error=str(e),
            )
            return self._failure(candidate_id, e)
        except StoreError as e:
            self.log.warning("Store error while processing candidate", candidate_id=candidate_id, error=str(e))
            return self._failure(candidate_id, e)
        except Exception as e:
            self.log.exception("Unexpected error while processing candidate", candidate_id=candidate_id, error=str(e))
            return self._failure(candidate_id, e)

        if outcome is Outcome.SKIPPED:
            self.metrics.dispatch_noop()
        return outcome

    def _failure(self, candidate_id: Optional[str], error: Exception) -> BatchFailure:
        self.metrics.dispatch_failed()
        return BatchFailure(candidate_id=candidate_id, error=str(error), error_type=type(error).__name__)
