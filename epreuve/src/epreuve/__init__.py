"""
Epreuve - test selection and execution reporting.

Public API:
- test / ignore: method and class markers
- EpreuveTest: optional base class with lifecycle hooks
- Invoker: prune, filter, run and summarize a set of classes
- TestRuntime: the execution runtime
"""

from epreuve.core.invoker import Invoker
from epreuve.runtime import EpreuveTest, TestRuntime, ignore, test

__version__ = "0.1.0"

__all__ = [
    "EpreuveTest",
    "Invoker",
    "TestRuntime",
    "ignore",
    "test",
    "__version__",
]
