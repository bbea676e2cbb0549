"""
Test fixtures and configuration.
"""

import sys
from typing import Iterator

import pytest

from epreuve.reporter.system_reporter import SystemReporter
from helpers.recording import RecordingListener, RecordingOutput


@pytest.fixture
def output() -> RecordingOutput:
    """Decorated, uncolored output sink with warn and info enabled."""
    return RecordingOutput()


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def reporter() -> SystemReporter:
    """Reporter that only logs errors."""
    return SystemReporter(name="epreuve_tests", level=40, verbose=0)


@pytest.fixture
def isolated_imports(monkeypatch) -> Iterator[None]:
    """Forget modules and sys.path entries added during a test."""
    monkeypatch.setattr(sys, "path", list(sys.path))
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]
