"""
Test markers.

Two ways to declare a test method:
- Decorate it with @test (any name)
- Name it test* (naming convention)

@ignore marks a method, or every method of a class, as ignored.
"""

import inspect
from typing import Any, Callable, Optional

TEST_MARKER = "__epreuve_test__"
IGNORE_MARKER = "__epreuve_ignore__"

TEST_PREFIX = "test"


def test(func: Callable) -> Callable:
    """
    Mark a function as a test method regardless of its name.

    Example:
        class Calculator:
            @test
            def adds_numbers(self):
                assert 1 + 1 == 2
    """
    setattr(func, TEST_MARKER, True)
    return func


# Keep pytest from treating the decorator itself as a test function.
test.__test__ = False


def ignore(reason: Any = ""):
    """
    Mark a test method or a whole class as ignored.

    Usable bare (@ignore) or with a reason (@ignore("flaky on CI")).
    """
    if callable(reason) and not isinstance(reason, str):
        setattr(reason, IGNORE_MARKER, "")
        return reason

    def decorator(obj):
        setattr(obj, IGNORE_MARKER, str(reason))
        return obj

    return decorator


def is_routine(member: Any) -> bool:
    """Check if a class member is a plain function or method."""
    return inspect.isfunction(member) or inspect.ismethod(member)


def has_test_marker(member: Any) -> bool:
    return bool(getattr(member, TEST_MARKER, False))


def is_test_method(name: str, member: Any) -> bool:
    """
    Check if a class member declares a test.

    Args:
        name: Attribute name on the class
        member: Attribute value

    Returns:
        True for functions marked with @test or named test*
    """
    if not is_routine(member):
        return False
    return has_test_marker(member) or name.startswith(TEST_PREFIX)


def ignored_reason(obj: Any) -> Optional[str]:
    """Return the @ignore reason, or None when not ignored."""
    return getattr(obj, IGNORE_MARKER, None)
