"""
Test runtime - executes test classes and streams run events.

Responsible for:
- Method discovery per class (re-validating what the pruner let through)
- Applying the filter to every method description
- Lifecycle hooks (sync or async) around classes and methods
- Delivering events, in order, to every listener
- Building the aggregate result

Placeholders for runtime plumbing (an empty filter result) are reported
under the epreuve.runtime namespace and counted like real tests; callers
net them out.
"""

import asyncio
import inspect
import time
import traceback
from dataclasses import dataclass, field
from types import FrameType
from typing import Any, Callable, List, Optional, Sequence

from epreuve.core.description import (
    Description,
    Failure,
    StackFrame,
    qualified_class_name,
)
from epreuve.core.events import (
    RunEvent,
    RunStarted,
    TestFailed,
    TestFinished,
    TestIgnored,
    TestStarted,
)
from epreuve.core.filters import FilterExpression, evaluate
from epreuve.core.results import AggregateResult
from epreuve.reporter.system_reporter import SystemReporter
from epreuve.runtime.base import EpreuveTest
from epreuve.runtime.markers import ignored_reason, is_test_method

SUITE_NAME = "epreuve.suite"
FILTER_PLACEHOLDER = "epreuve.runtime.Filter"
INITIALIZATION_ERROR = "initializationError"


@dataclass
class ClassPlan:
    """What will run for one class after filtering."""

    klass: type
    description: Description
    methods: List[Description] = field(default_factory=list)
    runnable: bool = True


class _Notifier:
    """Fans events out to listeners and keeps the runtime's counters."""

    def __init__(self, listeners: Sequence[Any]):
        self.listeners = list(listeners)
        self.run_count = 0
        self.ignore_count = 0
        self.failures: List[Failure] = []

    def fire(self, event: RunEvent) -> None:
        if isinstance(event, TestFinished):
            self.run_count += 1
        elif isinstance(event, TestIgnored):
            self.ignore_count += 1
        elif isinstance(event, TestFailed):
            self.failures.append(event.failure)

        for listener in self.listeners:
            listener.handle(event)


class TestRuntime:
    """
    Runs test classes in the given order.

    Single-threaded: events reach listeners one at a time.
    """

    __test__ = False

    def __init__(self, reporter: Optional[SystemReporter] = None):
        """
        Initialize test runtime.

        Args:
            reporter: Optional reporter for logging
        """
        self.reporter = reporter or SystemReporter(name="epreuve_runtime", verbose=1)

    def run(
        self,
        classes: Sequence[type],
        filter: Optional[FilterExpression] = None,
        listeners: Sequence[Any] = (),
    ) -> AggregateResult:
        """
        Run classes and return the aggregate result.

        Args:
            classes: Ordered test classes
            filter: Optional selection predicate over descriptions
            listeners: Event sinks exposing handle(event), and optionally
                finish(result)

        Returns:
            AggregateResult with the runtime's own totals
        """
        start_time = time.monotonic()
        notifier = _Notifier(listeners)

        plans = [self.plan(klass, filter) for klass in classes]
        plans = [plan for plan in plans if plan is not None]

        if filter is not None and not plans:
            self.reporter.debug(
                f"Filter {filter} left nothing to run", context="Runtime"
            )
            self._run_placeholder(notifier, f"No tests found matching {filter}")
        else:
            root = Description(SUITE_NAME, None, tuple(p.description for p in plans))
            notifier.fire(RunStarted(root))
            for plan in plans:
                self._run_class(plan, notifier)

        result = AggregateResult(
            run_count=notifier.run_count,
            failure_count=len(notifier.failures),
            ignore_count=notifier.ignore_count,
            elapsed_millis=(time.monotonic() - start_time) * 1000.0,
            failures=tuple(notifier.failures),
        )

        for listener in notifier.listeners:
            finish = getattr(listener, "finish", None)
            if callable(finish):
                finish(result)

        return result

    # ================================================================
    # PLANNING
    # ================================================================

    @staticmethod
    def test_method_names(klass: type) -> List[str]:
        """Names of runnable test methods, sorted."""
        return sorted(
            name
            for name, member in inspect.getmembers(klass)
            if is_test_method(name, member)
        )

    def plan(
        self, klass: type, filter: Optional[FilterExpression] = None
    ) -> Optional[ClassPlan]:
        """
        Work out which methods of a class survive the filter.

        Every method description is evaluated, so collecting filters see
        all of them.

        Returns:
            ClassPlan, or None when nothing in the class survives
        """
        names = self.test_method_names(klass)

        if not names:
            error = Description.for_method(klass, INITIALIZATION_ERROR)
            if filter is not None and not evaluate(filter, error):
                return None
            return ClassPlan(
                klass=klass,
                description=Description.for_class(klass, (error,)),
                methods=[error],
                runnable=False,
            )

        candidates = [Description.for_method(klass, name) for name in names]
        survivors = [
            description
            for description in candidates
            if filter is None or evaluate(filter, description)
        ]
        if not survivors:
            return None

        return ClassPlan(
            klass=klass,
            description=Description.for_class(klass, survivors),
            methods=survivors,
        )

    # ================================================================
    # EXECUTION
    # ================================================================

    def _run_placeholder(self, notifier: _Notifier, message: str) -> None:
        placeholder = Description(FILTER_PLACEHOLDER, INITIALIZATION_ERROR)
        notifier.fire(RunStarted(placeholder))
        notifier.fire(TestStarted(placeholder))
        notifier.fire(TestFailed(placeholder, message=message))
        notifier.fire(TestFinished(placeholder))

    def _run_class(self, plan: ClassPlan, notifier: _Notifier) -> None:
        if not plan.runnable:
            error = plan.methods[0]
            notifier.fire(TestStarted(error))
            notifier.fire(TestFailed(error, message="No runnable methods"))
            notifier.fire(TestFinished(error))
            return

        class_reason = ignored_reason(plan.klass)
        if class_reason is not None:
            for description in plan.methods:
                notifier.fire(TestIgnored(description, reason=class_reason))
            return

        loop = _LoopHolder()
        class_error: Optional[BaseException] = None
        instance = None

        try:
            instance = plan.klass()
            _call_hook(instance, "setup", "async_setup", loop)
        except Exception as e:
            class_error = e
            self.reporter.debug(
                f"Class setup failed for {plan.description.class_name}: {e}",
                context="Runtime",
            )

        try:
            for description in plan.methods:
                self._run_method(
                    plan, description, instance, class_error, loop, notifier
                )
        finally:
            if class_error is None:
                try:
                    _call_hook(instance, "teardown", "async_teardown", loop)
                except Exception as e:
                    self.reporter.error(
                        f"Teardown failed for {plan.description.class_name}: {e}",
                        context="Runtime",
                    )
            loop.close()

    def _run_method(
        self,
        plan: ClassPlan,
        description: Description,
        instance: Any,
        class_error: Optional[BaseException],
        loop: "_LoopHolder",
        notifier: _Notifier,
    ) -> None:
        method_name = description.method_name
        reason = ignored_reason(getattr(plan.klass, method_name, None))
        if reason is not None:
            notifier.fire(TestIgnored(description, reason=reason))
            return

        notifier.fire(TestStarted(description))
        start_time = time.monotonic()

        error = class_error
        if error is None:
            error = self._execute(instance, method_name, loop)

        if error is not None:
            notifier.fire(TestFailed.from_failure(build_failure(description, error)))
        notifier.fire(TestFinished(description, duration=time.monotonic() - start_time))

    def _execute(
        self, instance: Any, method_name: str, loop: "_LoopHolder"
    ) -> Optional[BaseException]:
        """Run one test method with its per-test hooks; return its error."""
        error: Optional[BaseException] = None
        try:
            _call_hook(instance, "setup_test", "async_setup_test", loop)
            _invoke(getattr(instance, method_name), loop)
        except Exception as e:
            error = e

        try:
            _call_hook(instance, "teardown_test", "async_teardown_test", loop)
        except Exception as e:
            if error is None:
                error = e

        return error


# ====================================================================
# HOOKS AND ASYNC SUPPORT
# ====================================================================


class _LoopHolder:
    """Event loop for one class's async tests, created on demand."""

    def __init__(self):
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def run(self, coroutine) -> Any:
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coroutine)

    def close(self) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.close()
        self._loop = None


def _invoke(method: Callable, loop: _LoopHolder) -> Any:
    if inspect.iscoroutinefunction(method):
        return loop.run(method())
    return method()


def _is_overridden(instance: Any, name: str) -> bool:
    """Check if a hook is defined by the test class, not EpreuveTest."""
    method = getattr(instance, name, None)
    if method is None:
        return False
    base = getattr(EpreuveTest, name, None)
    return getattr(method, "__func__", method) is not base


def _call_hook(
    instance: Any, sync_name: str, async_name: str, loop: _LoopHolder
) -> None:
    """Call the async hook when overridden, else the sync one if present."""
    async_hook = getattr(instance, async_name, None)
    if (
        async_hook is not None
        and inspect.iscoroutinefunction(async_hook)
        and _is_overridden(instance, async_name)
    ):
        loop.run(async_hook())
        return

    sync_hook = getattr(instance, sync_name, None)
    if callable(sync_hook):
        _invoke(sync_hook, loop)


# ====================================================================
# FAILURE CAPTURE
# ====================================================================


def build_failure(description: Description, error: BaseException) -> Failure:
    """
    Turn an exception into a Failure.

    Assertion messages are kept as-is; other exceptions are prefixed
    with their type. Frames are ordered innermost first.
    """
    if isinstance(error, AssertionError):
        message = str(error) or None
    else:
        message = f"{type(error).__name__}: {error}"

    frames = tuple(
        _stack_frame(frame, line_number)
        for frame, line_number in traceback.walk_tb(error.__traceback__)
    )

    return Failure(
        description=description,
        message=message,
        frames=tuple(reversed(frames)),
        exception_type=type(error).__name__,
        trace="".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    )


def _stack_frame(frame: FrameType, line_number: int) -> StackFrame:
    code = frame.f_code
    return StackFrame(
        type_name=_declaring_type(frame),
        function_name=code.co_name,
        file_name=code.co_filename,
        line_number=line_number,
    )


def _declaring_type(frame: FrameType) -> Optional[str]:
    """Qualified name of the class whose code the frame is running."""
    module = frame.f_globals.get("__name__")
    qualname = getattr(frame.f_code, "co_qualname", None)
    if module and qualname and "." in qualname:
        owner = qualname.rsplit(".", 1)[0]
        if not owner.endswith("<locals>"):
            return f"{module}.{owner}"

    owner = frame.f_locals.get("self")
    if owner is not None and qualname is None:
        return qualified_class_name(type(owner))
    return None
