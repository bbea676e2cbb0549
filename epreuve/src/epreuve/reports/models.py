"""
Report data models.

Shared data structures used by:
- json_reporter.py (writes one report per test class)
- result_schema.py (validates and reads reports back)
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union


class TestStatus(Enum):
    """Test outcome - single source of truth."""

    __test__ = False

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class IndividualTestResult:
    """
    Result of a single test method.
    """

    __test__ = False

    name: str
    status: str  # Use TestStatus.value
    duration: float
    error: Optional[str] = None
    line: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class TestFileResult:
    """
    Complete results for one test class.

    Contains aggregated stats and individual test results.
    """

    __test__ = False

    schema_version: str
    test_class: str
    total: int
    passed: int
    failed: int
    skipped: int
    duration: float
    timestamp: str
    tests: List[Union[IndividualTestResult, dict]]
    metadata: dict

    def __post_init__(self):
        """Convert dict tests to IndividualTestResult objects."""
        self.tests = [
            IndividualTestResult(**test) if isinstance(test, dict) else test
            for test in self.tests
        ]

    @classmethod
    def from_tests(
        cls,
        test_class: str,
        tests: List[IndividualTestResult],
        schema_version: str,
        metadata: Optional[dict] = None,
    ) -> "TestFileResult":
        """
        Build a class report, deriving counts and duration from its tests.

        Args:
            test_class: Qualified class name
            tests: Per-method results in execution order
            schema_version: Report schema version
            metadata: Free-form run details

        Returns:
            TestFileResult
        """
        statuses = [test.status for test in tests]
        return cls(
            schema_version=schema_version,
            test_class=test_class,
            total=len(tests),
            passed=statuses.count(TestStatus.PASS.value),
            failed=statuses.count(TestStatus.FAIL.value),
            skipped=statuses.count(TestStatus.SKIP.value),
            duration=sum(test.duration for test in tests),
            timestamp=datetime.now().isoformat(),
            tests=list(tests),
            metadata=metadata or {},
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        result["tests"] = [t.to_dict() for t in self.tests]
        return result

    @property
    def success(self) -> bool:
        """Check if all tests passed."""
        return self.failed == 0

    @property
    def failures(self) -> List[IndividualTestResult]:
        """Failed test results, in execution order."""
        return [t for t in self.tests if t.status == TestStatus.FAIL.value]
