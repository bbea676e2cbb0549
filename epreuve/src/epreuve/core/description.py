"""
Test unit identity and failure data.

Descriptions are produced by the runtime and read-only afterwards.
Identity is structural: class name plus method name.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Description:
    """
    Identifies one test unit.

    A description without a method name is a container (a whole class,
    or the suite root) and may carry child descriptions.
    """

    class_name: str
    method_name: Optional[str] = None
    children: Tuple["Description", ...] = field(
        default=(), compare=False, repr=False
    )

    @property
    def qualified_name(self) -> str:
        """Class name, or class name + '.' + method name."""
        if self.method_name is None:
            return self.class_name
        return f"{self.class_name}.{self.method_name}"

    @property
    def display_name(self) -> str:
        """Name shown on a progress line."""
        return self.method_name if self.method_name is not None else self.class_name

    @property
    def is_container(self) -> bool:
        return self.method_name is None

    @classmethod
    def for_class(cls, klass: type, children=()) -> "Description":
        """Build a container description for a test class."""
        return cls(qualified_class_name(klass), None, tuple(children))

    @classmethod
    def for_method(cls, klass: type, method_name: str) -> "Description":
        """Build a description for one test method of a class."""
        return cls(qualified_class_name(klass), method_name)


@dataclass(frozen=True)
class StackFrame:
    """One frame of a failing test's captured call stack."""

    type_name: Optional[str]
    function_name: str
    file_name: str
    line_number: int


@dataclass(frozen=True)
class Failure:
    """
    A recorded test failure.

    message is None when the exception carried no message.
    frames are ordered innermost first (the raising frame comes first).
    """

    description: Description
    message: Optional[str] = None
    frames: Tuple[StackFrame, ...] = ()
    exception_type: Optional[str] = None
    trace: str = ""


def qualified_class_name(klass: type) -> str:
    """Return module + qualname for a class."""
    return f"{klass.__module__}.{klass.__qualname__}"
