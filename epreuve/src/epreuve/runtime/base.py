"""
Optional base class for epreuve tests.

Any class with test* methods (or @test-marked ones) runs; inheriting
from EpreuveTest only adds documented no-op lifecycle hooks and an
integrated reporter. Tests may be sync or async.
"""

from abc import ABC
from typing import Optional

from epreuve.reporter.system_reporter import SystemReporter


class EpreuveTest(ABC):
    """
    Base class for test classes with async support.

    Optional class attributes:
        log_dir: str - Directory for this class's log file (default: none)

    Lifecycle hooks (all optional):
        setup() / async_setup() - Before all tests
        teardown() / async_teardown() - After all tests
        setup_test() / async_setup_test() - Before each test
        teardown_test() / async_teardown_test() - After each test

    Example (sync test):
        class MathTests(EpreuveTest):
            def test_addition(self):
                assert 2 + 2 == 4

    Example (async test):
        class ApiTests(EpreuveTest):
            async def async_setup(self):
                self.client = await create_client()

            async def test_endpoint(self):
                response = await self.client.get("/api/test")
                assert response.status_code == 200

            async def async_teardown(self):
                await self.client.close()
    """

    log_dir: Optional[str] = None

    def __init__(self):
        """Initialize test instance with integrated reporter."""
        self.reporter = SystemReporter(
            name=self.__class__.__name__,
            log_dir=self.log_dir,
            level=20,  # INFO
            verbose=1,
        )

    # ================================================================
    # LIFECYCLE HOOKS - SYNC (Override in subclass if needed)
    # ================================================================

    def setup(self) -> None:
        """
        Optional: Sync setup before all tests.

        Called ONCE before any test method.
        """

    def teardown(self) -> None:
        """
        Optional: Sync cleanup after all tests.

        Called ONCE after all test methods.
        """

    def setup_test(self) -> None:
        """Optional: Sync setup before each test."""

    def teardown_test(self) -> None:
        """Optional: Sync cleanup after each test."""

    # ================================================================
    # LIFECYCLE HOOKS - ASYNC (Override in subclass if needed)
    # ================================================================

    async def async_setup(self) -> None:
        """
        Optional: Async setup before all tests.

        Takes precedence over setup() when overridden.

        Example:
            async def async_setup(self):
                self.db = await connect_database()
        """

    async def async_teardown(self) -> None:
        """Optional: Async cleanup after all tests."""

    async def async_setup_test(self) -> None:
        """Optional: Async setup before each test."""

    async def async_teardown_test(self) -> None:
        """Optional: Async cleanup after each test."""
