"""
Selection and reporting core.

Modules:
- description: test identity and failure data
- filters: filter algebra and its evaluator
- pruner: cheap structural pre-filter over candidate classes
- synthetic: runtime placeholder classifier
- events / results: what the runtime streams and returns
- listener: per-test progress printing
- invoker: coordinates one run end to end
"""

from epreuve.core.description import Description, Failure, StackFrame
from epreuve.core.filters import (
    CollectAll,
    Intersect,
    MatchName,
    Union,
    build_filter,
    evaluate,
    split_matchers,
)
from epreuve.core.results import AggregateResult
from epreuve.core.synthetic import is_synthetic

__all__ = [
    "AggregateResult",
    "CollectAll",
    "Description",
    "Failure",
    "Intersect",
    "MatchName",
    "StackFrame",
    "Union",
    "build_filter",
    "evaluate",
    "is_synthetic",
    "split_matchers",
]
