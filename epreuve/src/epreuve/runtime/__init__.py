"""
Execution runtime.

Modules:
- markers: @test / @ignore decorators
- base: EpreuveTest base class with lifecycle hooks
- runner: TestRuntime, runs classes and streams events
"""

from epreuve.runtime.base import EpreuveTest
from epreuve.runtime.markers import ignore, test
from epreuve.runtime.runner import TestRuntime, build_failure

__all__ = [
    "EpreuveTest",
    "TestRuntime",
    "build_failure",
    "ignore",
    "test",
]
