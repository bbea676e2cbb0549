"""
Candidate pruner.

Cheap pre-filter over candidate classes. Only inspects member names and
markers; the runtime re-validates what it actually executes, so false
positives are fine and false negatives are not.
"""

import inspect
from typing import Iterable, Set

from epreuve.runtime.markers import TEST_PREFIX, has_test_marker, is_routine


def looks_like_test_class(candidate: type) -> bool:
    """
    Check if a class plausibly contains runnable tests.

    Args:
        candidate: Class to inspect (own and inherited members)

    Returns:
        True if any method is @test-marked or named test*
    """
    for name, member in inspect.getmembers(candidate):
        if not is_routine(member):
            continue
        if has_test_marker(member) or name.startswith(TEST_PREFIX):
            return True
    return False


def prune(classes: Iterable[type]) -> Set[type]:
    """
    Return the subset of classes that plausibly contain tests.

    Non-class inputs are discarded.
    """
    return {
        candidate
        for candidate in classes
        if inspect.isclass(candidate) and looks_like_test_class(candidate)
    }
