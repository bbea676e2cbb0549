"""
Run events emitted by the execution runtime.

Delivered one at a time, in execution order, to every listener.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from epreuve.core.description import Description, Failure, StackFrame


@dataclass(frozen=True)
class RunStarted:
    description: Description


@dataclass(frozen=True)
class TestStarted:
    __test__ = False

    description: Description


@dataclass(frozen=True)
class TestFailed:
    """A test raised; carries the failure detail."""

    __test__ = False

    description: Description
    message: Optional[str] = None
    frames: Tuple[StackFrame, ...] = ()
    exception_type: Optional[str] = None
    trace: str = ""

    @property
    def failure(self) -> Failure:
        return Failure(
            description=self.description,
            message=self.message,
            frames=self.frames,
            exception_type=self.exception_type,
            trace=self.trace,
        )

    @classmethod
    def from_failure(cls, failure: Failure) -> "TestFailed":
        return cls(
            description=failure.description,
            message=failure.message,
            frames=failure.frames,
            exception_type=failure.exception_type,
            trace=failure.trace,
        )


@dataclass(frozen=True)
class TestIgnored:
    __test__ = False

    description: Description
    reason: str = ""


@dataclass(frozen=True)
class TestFinished:
    __test__ = False

    description: Description
    duration: float = 0.0


RunEvent = Union[RunStarted, TestStarted, TestFailed, TestIgnored, TestFinished]
