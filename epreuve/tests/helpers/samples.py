"""
Sample test classes exercised by the epreuve test suite.

None of these names start with "Test", so pytest leaves them alone.
"""

import asyncio
from typing import Callable, Dict, List

from epreuve import EpreuveTest, ignore, test


def explode(value: str) -> None:
    raise ValueError(f"bad value {value}")


class Calculator:
    def test_add(self):
        assert 1 + 1 == 2

    def test_subtract(self):
        assert 3 - 1 == 2

    @test
    def multiplies(self):
        assert 2 * 3 == 6

    def helper(self):
        return "not a test"


class Parser(EpreuveTest):
    def test_parses_integer(self):
        assert int("42") == 42

    def test_parses_float(self):
        assert float("1.5") == 1.5


class AsyncService(EpreuveTest):
    async def async_setup(self):
        self.ready = True

    async def test_awaits(self):
        await asyncio.sleep(0)
        assert self.ready

    def test_sync_alongside(self):
        assert self.ready


class Broken:
    def test_fails(self):
        assert 1 == 2, "one is not two"

    def test_passes(self):
        assert True

    def test_raises(self):
        explode("x")


class Bare:
    def test_bare_assert(self):
        assert False


class Skipping:
    @ignore("flaky on CI")
    def test_flaky(self):
        raise AssertionError("never runs")

    def test_stable(self):
        assert True


@ignore
class Disabled:
    def test_first(self):
        raise AssertionError("never runs")

    def test_second(self):
        raise AssertionError("never runs")


class SetupExplodes(EpreuveTest):
    def setup(self):
        raise RuntimeError("no database")

    def test_one(self):
        assert True

    def test_two(self):
        assert True


class Lifecycle(EpreuveTest):
    calls: List[str] = []

    def setup(self):
        Lifecycle.calls.append("setup")

    def setup_test(self):
        Lifecycle.calls.append("setup_test")

    def test_a(self):
        Lifecycle.calls.append("test_a")

    def test_b(self):
        Lifecycle.calls.append("test_b")

    def teardown_test(self):
        Lifecycle.calls.append("teardown_test")

    def teardown(self):
        Lifecycle.calls.append("teardown")


class InheritedTests(Calculator):
    """Declares nothing itself; inherits Calculator's tests."""


class NotATest:
    test_value = 3

    def run(self):
        return self.test_value

    def Test_capitalized(self):
        return None


def make_suite(name: str, total: int, failing: int) -> type:
    """
    Build a class with `total` test methods, the first `failing` of
    which fail.
    """
    namespace: Dict[str, object] = {"__module__": __name__}

    def passing(self):
        assert True

    def failing_test(self):
        raise AssertionError("expected failure")

    for index in range(total):
        method: Callable = failing_test if index < failing else passing
        namespace[f"test_{index:03d}"] = method

    return type(name, (), namespace)
