"""
JSON report writer - machine-readable report per test class.

Runs as a second listener next to the RunListener. Collects outcomes as
events stream in and writes one report file per class when the runtime
finishes.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

from epreuve.core.description import Description
from epreuve.core.events import (
    RunEvent,
    TestFailed,
    TestFinished,
    TestIgnored,
    TestStarted,
)
from epreuve.core.results import AggregateResult
from epreuve.core.synthetic import is_synthetic
from epreuve.reporter.system_reporter import SystemReporter
from epreuve.reports.models import IndividualTestResult, TestFileResult, TestStatus
from epreuve.reports.result_schema import SCHEMA_VERSION, format_report

REPORT_PREFIX = "TEST-"
REPORT_SUFFIX = ".json"


def report_name_for(class_name: str) -> str:
    """Report file name for a test class."""
    return f"{REPORT_PREFIX}{class_name}{REPORT_SUFFIX}"


class JsonReportListener:
    """
    Writes TEST-<class>.json files into a report directory.

    Synthetic descriptions are ignored.
    """

    def __init__(self, reports_dir: Path, reporter: Optional[SystemReporter] = None):
        """
        Initialize report listener.

        Args:
            reports_dir: Directory receiving report files
            reporter: Optional reporter for logging
        """
        self.reports_dir = Path(reports_dir)
        self.reporter = reporter or SystemReporter(name="epreuve_reports", verbose=1)
        self.results: Dict[str, List[IndividualTestResult]] = {}
        self._errors: Dict[Description, TestFailed] = {}
        self.written: List[Path] = []

    def handle(self, event: RunEvent) -> None:
        """Record one event."""
        description = event.description
        if is_synthetic(description) or description.method_name is None:
            return

        if isinstance(event, TestStarted):
            self.results.setdefault(description.class_name, [])
        elif isinstance(event, TestFailed):
            self._errors[description] = event
        elif isinstance(event, TestIgnored):
            self._record(
                description,
                IndividualTestResult(
                    name=description.method_name,
                    status=TestStatus.SKIP.value,
                    duration=0.0,
                    error=event.reason or None,
                ),
            )
        elif isinstance(event, TestFinished):
            failed = self._errors.pop(description, None)
            if failed is None:
                result = IndividualTestResult(
                    name=description.method_name,
                    status=TestStatus.PASS.value,
                    duration=event.duration,
                )
            else:
                result = IndividualTestResult(
                    name=description.method_name,
                    status=TestStatus.FAIL.value,
                    duration=event.duration,
                    error=failed.message,
                    line=_line_in_class(failed),
                )
            self._record(description, result)

    def _record(self, description: Description, result: IndividualTestResult) -> None:
        self.results.setdefault(description.class_name, []).append(result)

    def finish(self, result: AggregateResult) -> List[Path]:
        """
        Write one report per class seen during the run.

        Args:
            result: Aggregate result of the run

        Returns:
            Paths of the written report files
        """
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        metadata = {
            "python_version": sys.version.split()[0],
            "run_elapsed_millis": result.elapsed_millis,
        }

        for class_name, tests in self.results.items():
            report = TestFileResult.from_tests(
                class_name, tests, SCHEMA_VERSION, metadata=dict(metadata)
            )
            path = self.reports_dir / report_name_for(class_name)
            path.write_text(format_report(report.to_dict()), encoding="utf-8")
            self.written.append(path)
            self.reporter.debug(f"Wrote report: {path}", context="Reports")

        return self.written


def _line_in_class(failed: TestFailed) -> Optional[int]:
    for frame in failed.frames:
        if frame.type_name == failed.description.class_name:
            return frame.line_number
    return None
