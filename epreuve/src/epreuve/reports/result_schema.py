"""
Report schema validation and parsing.

Defines the JSON contract of per-class report files.
Single source of truth for the report format.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from epreuve.reports.models import TestFileResult, TestStatus

# Schema version - increment on breaking changes
SCHEMA_VERSION = "1.0"

# Required top-level fields in a report
REQUIRED_FIELDS = [
    "schema_version",
    "test_class",
    "total",
    "passed",
    "failed",
    "skipped",
    "duration",
    "timestamp",
    "tests",
    "metadata",
]

# Valid test statuses
VALID_STATUSES = [s.value for s in TestStatus]


def validate_report(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate a report document against the schema.

    Args:
        data: Parsed JSON report

    Returns:
        Tuple of (is_valid, error_message)
        error_message is None if valid
    """
    for field in REQUIRED_FIELDS:
        if field not in data:
            return False, f"Missing required field: {field}"

    if data["schema_version"] != SCHEMA_VERSION:
        return (
            False,
            f"Schema version mismatch: "
            f"{data['schema_version']} != {SCHEMA_VERSION}",
        )

    if data["total"] != len(data["tests"]):
        return (
            False,
            f"Total count mismatch: {data['total']} != {len(data['tests'])}",
        )

    for test in data["tests"]:
        if "status" not in test:
            return False, "Test result missing status field"
        if test["status"] not in VALID_STATUSES:
            return False, f"Invalid test status: {test['status']}"

    passed = sum(1 for t in data["tests"] if t["status"] == TestStatus.PASS.value)
    failed = sum(1 for t in data["tests"] if t["status"] == TestStatus.FAIL.value)
    skipped = sum(1 for t in data["tests"] if t["status"] == TestStatus.SKIP.value)

    if data["passed"] != passed:
        return False, "Passed count mismatch"
    if data["failed"] != failed:
        return False, "Failed count mismatch"
    if data["skipped"] != skipped:
        return False, "Skipped count mismatch"

    return True, None


def format_report(data: Dict[str, Any]) -> str:
    """
    Format a report dictionary as JSON text.

    Args:
        data: Report dictionary

    Returns:
        Indented JSON string
    """
    return json.dumps(data, indent=2)


def load_report(path: Path) -> Optional[TestFileResult]:
    """
    Read a report file back.

    Args:
        path: Report file path

    Returns:
        TestFileResult, or None if the file is unreadable or invalid
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None

    is_valid, _ = validate_report(data)
    if not is_valid:
        return None
    return TestFileResult(**data)
