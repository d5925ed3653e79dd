"""
ProcessingStats - Statistics for a batch of pipeline runs.
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .errors import ThumbnailError
from .pipeline import PipelineResult


@dataclass
class ProcessingStats:
    """
    Statistics for a CLI processing run.

    Attributes:
        total_to_process: Number of objects requested
        completed: Thumbnails generated
        skipped: Objects skipped (ineligible, thumbnails, already present)
        retryable_errors: Transient failures
        permanent_errors: Terminal failures
        bytes_generated: Total bytes of thumbnails generated
        start_time: Start timestamp
        skip_reasons: Count of skips by reason
        error_details: List of error messages
    """
    total_to_process: int = 0
    completed: int = 0
    skipped: int = 0
    retryable_errors: int = 0
    permanent_errors: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    skip_reasons: Counter = field(default_factory=Counter)
    error_details: List[str] = field(default_factory=list)

    def record_result(self, result: PipelineResult) -> None:
        if result.skipped:
            self.record_skip(result.reason.value)
        else:
            self.completed += 1
            self.bytes_generated += result.size or 0

    def record_skip(self, reason: str) -> None:
        self.skipped += 1
        self.skip_reasons[reason] += 1

    def record_error(self, key: str, error: ThumbnailError) -> None:
        if error.retryable:
            self.retryable_errors += 1
        else:
            self.permanent_errors += 1
        self.error_details.append(f"{key}: {error}")

    @property
    def errors(self) -> int:
        """Total failures."""
        return self.retryable_errors + self.permanent_errors

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Processing rate in thumbnails per second."""
        if self.elapsed_seconds > 0:
            return self.completed / self.elapsed_seconds
        return 0.0

    @property
    def completed_count(self) -> int:
        """Total handled (completed + skipped + errors)."""
        return self.completed + self.skipped + self.errors

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.completed_count
