"""
Run listener - classifies the runtime's event stream as it arrives.

Responsible for:
- Announcing the run and each class the first time it is seen
- Per-test progress lines (started, then success/failure/ignored)
- Buffering failures for an on-demand reprint
- Keeping runtime placeholders out of every printed line
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from epreuve.core.description import Description, Failure
from epreuve.core.events import (
    RunEvent,
    RunStarted,
    TestFailed,
    TestFinished,
    TestIgnored,
    TestStarted,
)
from epreuve.core.synthetic import is_synthetic
from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.output import Output

RUN_EVENT_TYPES = (RunStarted, TestStarted, TestFailed, TestFinished, TestIgnored)

SUCCESS_LINE = f"^green^^i^ {EpreuveEmoji.SUCCESS} SUCCESS {EpreuveEmoji.SUCCESS} ^r^"
FAILURE_LINE = f"^red^^i^ {EpreuveEmoji.FAILURE} FAILURE {EpreuveEmoji.FAILURE} ^r^ %s"
IGNORED_LINE = f"^yellow^^i^ {EpreuveEmoji.IGNORED} IGNORED {EpreuveEmoji.IGNORED} ^r^"
PROGRESS_LINE = "\t^b^%s^r^ \t"


@dataclass
class ListenerState:
    """Per-run listener state, owned by the invoker."""

    failures: Dict[Description, Failure] = field(default_factory=dict)
    # Insertion-ordered set of class names.
    seen_classes: Dict[str, None] = field(default_factory=dict)


def failure_message(failure: Failure) -> str:
    """
    Render a failure message with the closest line in the test class.

    The first stack frame belonging to the failing class supplies the
    line number; without one the bare message is used.
    """
    if not failure.message:
        return ""

    class_name = failure.description.class_name
    for frame in failure.frames:
        if frame.type_name == class_name:
            return f"@ ^b^line {frame.line_number}^r^ [ {failure.message} ]"
    return f"[ {failure.message} ]"


class RunListener:
    """
    Stateful observer of one run's event stream.

    Events must be delivered one at a time, in execution order.
    """

    def __init__(self, output: Output, state: Optional[ListenerState] = None):
        """
        Initialize run listener.

        Args:
            output: Markup output sink
            state: Fresh per-run state (default: new empty state)
        """
        self.output = output
        self.state = state if state is not None else ListenerState()

    def handle(self, event: RunEvent) -> None:
        """Apply one event."""
        if not isinstance(event, RUN_EVENT_TYPES):
            raise TypeError(f"Unknown run event: {event!r}")
        if is_synthetic(event.description):
            return

        if isinstance(event, RunStarted):
            self._run_started(event.description)
        elif isinstance(event, TestStarted):
            self._test_started(event.description)
        elif isinstance(event, TestFailed):
            self.state.failures[event.description] = event.failure
        elif isinstance(event, TestFinished):
            self._test_finished(event.description)
        elif isinstance(event, TestIgnored):
            self._test_ignored(event.description)

    def handle_all(self, events: Iterable[RunEvent]) -> None:
        for event in events:
            self.handle(event)

    # ================================================================
    # TRANSITIONS
    # ================================================================

    def _run_started(self, description: Description) -> None:
        self.output.privileged(
            "\nRunning tests from ^b^%d^r^ classes\n", len(description.children)
        )

    def _test_started(self, description: Description) -> None:
        self._announce_class(description)
        self.output.privileged(PROGRESS_LINE, description.display_name, end="")

    def _test_finished(self, description: Description) -> None:
        failure = self.state.failures.get(description)
        if failure is None:
            self.output.privileged(SUCCESS_LINE)
        else:
            self.output.privileged(FAILURE_LINE, failure_message(failure))

    def _test_ignored(self, description: Description) -> None:
        self._announce_class(description)
        self.output.privileged(PROGRESS_LINE, description.display_name, end="")
        self.output.privileged(IGNORED_LINE)

    def _announce_class(self, description: Description) -> None:
        if description.class_name in self.state.seen_classes:
            return
        self.state.seen_classes[description.class_name] = None
        self.output.privileged("^b^%s^r^", description.class_name)

    # ================================================================
    # REPRINT
    # ================================================================

    def print_failures(self) -> None:
        """Re-emit every buffered failure, ordered by class then method."""
        ordered = sorted(
            self.state.failures.values(),
            key=lambda f: (f.description.class_name, f.description.method_name or ""),
        )
        current_class = None
        for failure in ordered:
            description = failure.description
            if description.class_name != current_class:
                current_class = description.class_name
                self.output.privileged("^b^%s^r^", current_class)
            self.output.privileged(PROGRESS_LINE, description.display_name, end="")
            self.output.privileged(FAILURE_LINE, failure_message(failure))
            if failure.trace:
                for line in failure.trace.rstrip().splitlines():
                    self.output.print("^dbug^ %s", line)
