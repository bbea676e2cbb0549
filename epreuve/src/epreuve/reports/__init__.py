"""
Machine-readable test reports.

- JsonReportListener: writes TEST-<class>.json per test class
- report_name_for: report file naming convention
- Report models and schema validation
"""

from epreuve.reports.json_reporter import JsonReportListener, report_name_for
from epreuve.reports.models import IndividualTestResult, TestFileResult, TestStatus
from epreuve.reports.result_schema import (
    SCHEMA_VERSION,
    format_report,
    load_report,
    validate_report,
)

__all__ = [
    "JsonReportListener",
    "report_name_for",
    "IndividualTestResult",
    "TestFileResult",
    "TestStatus",
    "SCHEMA_VERSION",
    "format_report",
    "load_report",
    "validate_report",
]
