"""
Filter expressions over test descriptions.

A small closed algebra evaluated by one recursive function:
- MatchName: qualified-name predicate
- Union: logical OR over operands
- Intersect: logical AND, left side always evaluated first
- CollectAll: identity filter that records every description it sees

Evaluation order matters: CollectAll has a side effect and must run
even when the other side of an Intersect rejects the description.
"""

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import List, Optional, Sequence, Set, Tuple, Union as TypingUnion

from epreuve.core.description import Description

GLOB_CHARS = ("*", "?", "[")


@dataclass(frozen=True)
class MatchName:
    """Matches descriptions whose qualified name satisfies pattern."""

    pattern: str

    @property
    def is_glob(self) -> bool:
        return any(char in self.pattern for char in GLOB_CHARS)

    def matches(self, name: str) -> bool:
        if self.is_glob:
            return fnmatchcase(name, self.pattern)
        return self.pattern in name

    def __str__(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class Union:
    """True when any operand is true."""

    operands: Tuple["FilterExpression", ...] = ()

    def __str__(self) -> str:
        return " OR ".join(str(operand) for operand in self.operands)


@dataclass(frozen=True)
class Intersect:
    """True when both sides are true; left is evaluated unconditionally."""

    left: "FilterExpression"
    right: "FilterExpression"

    def __str__(self) -> str:
        return str(self.right)


@dataclass(eq=False)
class CollectAll:
    """Always true; collects every description it evaluates."""

    collected: Set[Description] = field(default_factory=set)

    def __str__(self) -> str:
        return "all"


FilterExpression = TypingUnion[MatchName, Union, Intersect, CollectAll]


def evaluate(expression: FilterExpression, description: Description) -> bool:
    """
    Evaluate a filter expression against one description.

    Args:
        expression: Filter tree
        description: Test unit under consideration

    Returns:
        True if the description should run
    """
    if isinstance(expression, CollectAll):
        expression.collected.add(description)
        return True

    if isinstance(expression, Intersect):
        left = evaluate(expression.left, description)
        return evaluate(expression.right, description) and left

    if isinstance(expression, Union):
        return any(evaluate(operand, description) for operand in expression.operands)

    if isinstance(expression, MatchName):
        if expression.matches(description.qualified_name):
            return True
        # Containers run when any of their children would.
        return any(evaluate(expression, child) for child in description.children)

    raise TypeError(f"Unknown filter expression: {expression!r}")


def split_matchers(raw: Optional[str]) -> List[str]:
    """
    Split a raw comma-separated matcher argument.

    Blank entries are dropped; None gives an empty list.
    """
    if raw is None:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_filter(
    patterns: Sequence[str],
) -> Tuple[FilterExpression, CollectAll]:
    """
    Build the effective filter for a run.

    Args:
        patterns: User matcher patterns (possibly empty)

    Returns:
        Tuple of (filter expression, its CollectAll collector)
    """
    collector = CollectAll()
    if not patterns:
        return collector, collector

    matchers = Union(tuple(MatchName(pattern) for pattern in patterns))
    return Intersect(collector, matchers), collector
