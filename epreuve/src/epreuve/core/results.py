"""
Aggregate run result.

Produced once by the runtime at the end of a run. Counts are the
runtime's own totals and include its synthetic placeholders; the
invoker nets those out.
"""

from dataclasses import dataclass
from typing import Tuple

from epreuve.core.description import Failure
from epreuve.core.synthetic import is_synthetic


@dataclass(frozen=True)
class AggregateResult:
    """Final counters and failure list of one run."""

    run_count: int = 0
    failure_count: int = 0
    ignore_count: int = 0
    elapsed_millis: float = 0.0
    failures: Tuple[Failure, ...] = ()

    @property
    def successful(self) -> bool:
        return self.failure_count == 0

    @property
    def synthetic_count(self) -> int:
        """Number of failures raised on runtime placeholders."""
        return sum(1 for failure in self.failures if is_synthetic(failure.description))

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_millis / 1000.0
