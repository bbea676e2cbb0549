"""
Invoker - main coordinator for one test run.

Coordinates:
- Candidate pruning (cheap structural check)
- Filter construction from user matchers
- Deterministic class ordering
- Runtime invocation with the run listener and report writer attached
- Result reduction (runtime placeholders netted out)
- Summary, report locations and exit status
"""

from contextlib import nullcontext
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from epreuve.config import Context, PropertyStore
from epreuve.core.description import qualified_class_name
from epreuve.core.filters import CollectAll, FilterExpression, build_filter
from epreuve.core.listener import ListenerState, RunListener
from epreuve.core.pruner import prune
from epreuve.core.results import AggregateResult
from epreuve.core.synthetic import is_synthetic
from epreuve.exceptions import RunnerError
from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.output import Output
from epreuve.reporter.system_reporter import SystemReporter
from epreuve.reports.json_reporter import JsonReportListener, report_name_for
from epreuve.runtime.runner import TestRuntime

REPRINT_THRESHOLD = 50
REPORTS_DIR_KEY = "reports.dir"
PROJECT_CONTEXT = "project"

NO_TESTS_FOUND = "No tests found, nothing to test."


class Invoker:
    """
    Runs a set of candidate classes and reports the outcome.

    Each run() builds fresh listener state; nothing leaks between runs.
    """

    def __init__(
        self,
        candidates: Iterable[type],
        matchers: Optional[Sequence[str]] = None,
        original_matchers: Optional[str] = None,
        *,
        output: Output,
        runtime: Optional[TestRuntime] = None,
        properties: Optional[PropertyStore] = None,
        reporter: Optional[SystemReporter] = None,
        reprint_threshold: int = REPRINT_THRESHOLD,
        capture_path: Optional[Path] = None,
    ):
        """
        Initialize invoker.

        Args:
            candidates: Classes that may contain tests
            matchers: Split matcher patterns (None or empty = run everything)
            original_matchers: Raw matcher argument as the user typed it
            output: Markup output sink
            runtime: Execution runtime (default: TestRuntime)
            properties: Property store providing project reports.dir
            reporter: Optional reporter for logging
            reprint_threshold: Run size above which failures are reprinted
            capture_path: File receiving test stdout (None = no capture)
        """
        self.reporter = reporter or SystemReporter(name="epreuve", verbose=1)
        candidates = list(candidates)
        self.classes = prune(candidates)
        self.reporter.debug(
            f"Pruned {len(candidates)} candidate(s) to {len(self.classes)} class(es)",
            context="Invoker",
            verbose_level=2,
        )

        self.matchers: List[str] = list(matchers or [])
        self.original_matchers = original_matchers
        self.filter: Optional[FilterExpression] = None
        self.collector: Optional[CollectAll] = None

        self.output = output
        self.runtime = runtime or TestRuntime(self.reporter)
        self.properties = properties or PropertyStore()
        self.reprint_threshold = reprint_threshold
        self.capture_path = capture_path

        self.listener: Optional[RunListener] = None
        self.last_result: Optional[AggregateResult] = None

    @property
    def reports_dir(self) -> Optional[str]:
        return self.properties.get(REPORTS_DIR_KEY, Context.named(PROJECT_CONTEXT))

    def sorted_classes(self) -> List[type]:
        """Pruned classes in execution order (by qualified name)."""
        return sorted(self.classes, key=qualified_class_name)

    def run(self) -> int:
        """
        Run the tests and print the summary.

        Returns:
            Exit code (0 = no failures, 1 = at least one failure)

        Raises:
            RunnerError: If the runtime itself fails
        """
        if not self.classes:
            self.output.privileged(NO_TESTS_FOUND)
            return 0

        self.filter, self.collector = build_filter(self.matchers)
        self.listener = RunListener(self.output, ListenerState())
        listeners = [self.listener]
        if self.reports_dir:
            listeners.append(JsonReportListener(Path(self.reports_dir), self.reporter))

        ordered = self.sorted_classes()
        self.reporter.debug(
            f"{EpreuveEmoji.TEST_RUN} Running {len(ordered)} class(es) "
            f"with filter {self.filter}",
            context="Invoker",
            verbose_level=2,
        )

        capture = (
            self.output.capture(self.capture_path)
            if self.capture_path
            else nullcontext()
        )
        try:
            with capture:
                result = self.runtime.run(ordered, self.filter, listeners)
        except Exception as e:
            self.reporter.error(f"Test runtime failed: {e}", context="Invoker")
            raise RunnerError(f"Test runtime failed: {e}", cause=e) from e

        self.last_result = result
        return self.summarize(result)

    # ================================================================
    # SUMMARY
    # ================================================================

    def summarize(self, result: AggregateResult) -> int:
        """
        Reduce an aggregate result to the printed summary and exit code.

        Args:
            result: Runtime totals (placeholders included)

        Returns:
            Exit code
        """
        synthetic = result.synthetic_count
        run_count = result.run_count - synthetic
        fail_count = result.failure_count - synthetic

        if run_count == 0:
            if self.original_matchers is not None:
                if self.output.is_warn():
                    self.output.privileged(
                        "^warn^ No tests matched ^b^%s^r^", self.original_matchers
                    )
            else:
                self.output.privileged(NO_TESTS_FOUND)
            return 0

        if run_count > self.reprint_threshold and fail_count > 0 and self.listener:
            self.output.privileged(
                "\nMore than %d tests, ^b^reprinting^r^ test failures "
                "for ease of review.\n",
                self.reprint_threshold,
            )
            self.listener.print_failures()

        self.output.privileged(
            "\nRan ^b^%d^r^ test%s in ^b^%.3f seconds^r^ with %s%d%s^r^ "
            "failure%s and %s%d^r^ ignored.\n",
            run_count,
            "" if run_count == 1 else "s",
            result.elapsed_seconds,
            "^red^^i^ " if fail_count > 0 else "^green^",
            fail_count,
            "" if fail_count == 0 else " ",
            "" if fail_count == 1 else "s",
            "^yellow^^i^" if result.ignore_count > 0 else "^b^",
            result.ignore_count,
        )

        if fail_count > 0 and self.output.is_info() and self.reports_dir:
            self._print_report_paths(result, fail_count)

        self.reporter.debug(
            f"Run complete: {run_count} run, {fail_count} failed, "
            f"{result.ignore_count} ignored",
            context="Invoker",
            verbose_level=2,
        )
        return 1 if fail_count != 0 else 0

    def report_paths(self, result: AggregateResult) -> List[str]:
        """Distinct report files of failing classes, first-seen order."""
        paths: List[str] = []
        for failure in result.failures:
            if is_synthetic(failure.description):
                continue
            path = str(
                Path(self.reports_dir) / report_name_for(failure.description.class_name)
            )
            if path not in paths:
                paths.append(path)
        return paths

    def _print_report_paths(self, result: AggregateResult, fail_count: int) -> None:
        self.output.privileged(
            "^info^ For %sdetailed test report%s: ",
            "a " if fail_count == 1 else "",
            "" if fail_count == 1 else "s",
        )
        for path in self.report_paths(result):
            self.output.privileged("^info^     ^b^less %s^r^", path)
        self.output.privileged("")
