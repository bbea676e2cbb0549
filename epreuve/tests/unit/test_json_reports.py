"""
Unit tests for JSON report writing and validation.
"""

import inspect
import json

from epreuve.core.filters import MatchName
from epreuve.reports import (
    SCHEMA_VERSION,
    JsonReportListener,
    TestStatus,
    load_report,
    report_name_for,
    validate_report,
)
from epreuve.runtime import TestRuntime
from helpers.samples import Broken, Calculator, Disabled, Skipping


def run_with_reports(classes, reports_dir, reporter, filter=None):
    listener = JsonReportListener(reports_dir, reporter)
    TestRuntime(reporter).run(classes, filter, [listener])
    return listener


def results_by_name(report):
    return {test.name: test for test in report.tests}


class TestReportName:
    def test_naming_convention(self):
        assert report_name_for("pkg.Calculator") == "TEST-pkg.Calculator.json"


class TestJsonReportListener:
    """One report file per class."""

    def test_writes_one_file_per_class(self, tmp_path, reporter):
        listener = run_with_reports([Broken, Skipping, Disabled], tmp_path, reporter)

        names = sorted(path.name for path in listener.written)
        assert names == [
            "TEST-helpers.samples.Broken.json",
            "TEST-helpers.samples.Disabled.json",
            "TEST-helpers.samples.Skipping.json",
        ]

    def test_failures_carry_message_and_line(self, tmp_path, reporter):
        run_with_reports([Broken], tmp_path, reporter)
        report = load_report(tmp_path / report_name_for("helpers.samples.Broken"))

        assert report is not None
        assert (report.total, report.passed, report.failed) == (3, 1, 2)
        assert not report.success
        assert [t.name for t in report.failures] == ["test_fails", "test_raises"]

        tests = results_by_name(report)
        _, start = inspect.getsourcelines(Broken.test_fails)
        assert tests["test_fails"].status == TestStatus.FAIL.value
        assert tests["test_fails"].error == "one is not two"
        assert tests["test_fails"].line == start + 1
        assert tests["test_raises"].error == "ValueError: bad value x"
        assert tests["test_passes"].status == TestStatus.PASS.value
        assert tests["test_passes"].error is None

    def test_ignored_tests_are_skips(self, tmp_path, reporter):
        run_with_reports([Skipping, Disabled], tmp_path, reporter)

        skipping = load_report(tmp_path / report_name_for("helpers.samples.Skipping"))
        assert skipping.skipped == 1
        assert results_by_name(skipping)["test_flaky"].error == "flaky on CI"

        disabled = load_report(tmp_path / report_name_for("helpers.samples.Disabled"))
        assert disabled.skipped == 2
        assert disabled.total == 2

    def test_placeholder_writes_nothing(self, tmp_path, reporter):
        listener = run_with_reports(
            [Calculator], tmp_path, reporter, filter=MatchName("zzz")
        )
        assert listener.written == []
        assert list(tmp_path.iterdir()) == []

    def test_creates_missing_directory(self, tmp_path, reporter):
        target = tmp_path / "build" / "reports"
        run_with_reports([Calculator], target, reporter)
        assert (target / report_name_for("helpers.samples.Calculator")).exists()


class TestValidateReport:
    """Schema checks."""

    def _report(self, tmp_path, reporter):
        run_with_reports([Broken], tmp_path, reporter)
        path = tmp_path / report_name_for("helpers.samples.Broken")
        return json.loads(path.read_text(encoding="utf-8"))

    def test_written_reports_are_valid(self, tmp_path, reporter):
        data = self._report(tmp_path, reporter)

        assert validate_report(data) == (True, None)
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["test_class"] == "helpers.samples.Broken"

    def test_missing_field(self, tmp_path, reporter):
        data = self._report(tmp_path, reporter)
        del data["metadata"]
        assert validate_report(data) == (False, "Missing required field: metadata")

    def test_count_mismatch(self, tmp_path, reporter):
        data = self._report(tmp_path, reporter)
        data["failed"] = 0
        assert validate_report(data) == (False, "Failed count mismatch")

    def test_invalid_status(self, tmp_path, reporter):
        data = self._report(tmp_path, reporter)
        data["tests"][0]["status"] = "exploded"
        valid, message = validate_report(data)
        assert not valid
        assert "Invalid test status" in message

    def test_load_rejects_garbage(self, tmp_path):
        path = tmp_path / "TEST-x.json"
        path.write_text("{not json")
        assert load_report(path) is None
        assert load_report(tmp_path / "absent.json") is None
