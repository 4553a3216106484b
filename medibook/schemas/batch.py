"""Batch run schemas returned by the lifecycle entry points."""
from pydantic import BaseModel, Field
from typing import Optional, List


class BatchFailure(BaseModel):
    """One candidate that could not be processed."""
    candidate_id: Optional[str] = None  # None when the candidate query itself failed
    error: str
    error_type: str


class BatchResult(BaseModel):
    """Aggregate outcome of one batch run."""
    attempted: int = 0
    succeeded: int = 0
    applied: int = 0  # candidates that caused a write
    skipped: int = 0  # candidates already in the desired end state
    failures: List[BatchFailure] = Field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    @classmethod
    def fetch_failed(cls, error: Exception) -> "BatchResult":
        """Result for a run whose candidate query raised."""
        return cls(failures=[BatchFailure(error=str(error), error_type=type(error).__name__)])
