"""
Markup output sink - renders semantic tags through Rich.

Format strings carry inline tags between carets:
- ^b^ bold, ^i^ inverse, ^n^ dim, ^r^ reset
- ^red^, ^green^, ^yellow^, ... colors
- ^warn^, ^info^, ^dbug^, ^error^, ^epreuve^ level prefixes

A line tagged with a disabled level is dropped. When output is not
decorated, regular lines are suppressed and only privileged lines are
written, as plain text with level prefixes kept.

Privileged lines always reach the terminal. While test output is being
captured to a file, they travel through the captured stdout marked with
PRIVILEGED_PREFIX, and PrivilegedStream forwards them untouched.
"""

import io
import re
import sys
from contextlib import contextmanager, redirect_stdout
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple

from rich.console import Console
from rich.text import Text

PRIVILEGED_PREFIX = "^priv^"

TAG_PATTERN = re.compile(r"\^([a-z_]+)\^")

RESET_TAG = "r"

STYLE_TAGS = {
    "b": "bold",
    "i": "reverse",
    "n": "dim",
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "magenta",
    "cyan": "cyan",
    "white": "white",
}

# tag -> (prefix text, prefix style)
LEVEL_TAGS = {
    "epreuve": ("[epreuve]", "yellow"),
    "error": ("[err!]", "bold red"),
    "warn": ("[warn]", "bold yellow"),
    "info": ("[info]", "bold blue"),
    "dbug": ("[dbug]", "bold bright_black"),
}


class PrivilegedStream(io.TextIOBase):
    """
    Text stream splitting privileged writes from everything else.

    Writes starting with PRIVILEGED_PREFIX go to delegate with the
    prefix removed; all other writes go to capture.
    """

    def __init__(self, delegate: IO[str], capture: IO[str]):
        """
        Initialize privileged stream.

        Args:
            delegate: Real terminal stream
            capture: Destination for non-privileged output
        """
        super().__init__()
        self.delegate = delegate
        self.capture = capture

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return self.delegate.isatty()

    def write(self, text: str) -> int:
        if text.startswith(PRIVILEGED_PREFIX):
            self.delegate.write(text[len(PRIVILEGED_PREFIX) :])
        else:
            self.capture.write(text)
        return len(text)

    def flush(self) -> None:
        self.delegate.flush()
        self.capture.flush()


class Output:
    """
    Severity-aware markup printer.

    Regular lines (print/print_no_line) honor level enablement and the
    decoration flag. Privileged lines (privileged) always write.
    """

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        warn: bool = True,
        info: bool = True,
        debug: bool = False,
        decorated: bool = True,
        color: bool = True,
        force_terminal: Optional[bool] = None,
    ):
        """
        Initialize output sink.

        Args:
            stream: Destination stream (default: current sys.stdout)
            warn: Enable ^warn^ lines
            info: Enable ^info^ lines
            debug: Enable ^dbug^ lines
            decorated: If False, suppress regular lines entirely
            color: Allow colors (styles like bold still apply)
            force_terminal: Force or deny ANSI rendering (default: detect)
        """
        self._stream = stream
        self._levels = {"warn": warn, "info": info, "dbug": debug}
        self._decorated = decorated
        self._color = color
        self._capturing = False
        self.console = Console(
            file=stream,
            highlight=False,
            markup=False,
            emoji=False,
            no_color=not color,
            force_terminal=force_terminal,
            soft_wrap=True,
        )

    @classmethod
    def from_settings(cls, settings, stream: Optional[IO[str]] = None) -> "Output":
        """Build from a Settings object (log_levels, decorated, color)."""
        levels = {level.strip() for level in settings.log_levels.split(",")}
        return cls(
            stream=stream,
            warn="warn" in levels,
            info="info" in levels,
            debug="debug" in levels or "dbug" in levels,
            decorated=settings.decorated,
            color=settings.color,
        )

    # ================================================================
    # LEVELS
    # ================================================================

    def is_warn(self) -> bool:
        return self._levels["warn"]

    def is_info(self) -> bool:
        return self._levels["info"]

    def is_debug(self) -> bool:
        return self._levels["dbug"]

    def is_decorated(self) -> bool:
        return self._decorated

    def enable(self, level: str) -> None:
        """Enable a level ("warn", "info", "debug"/"dbug")."""
        self._levels["dbug" if level == "debug" else level] = True

    def disable(self, level: str) -> None:
        self._levels["dbug" if level == "debug" else level] = False

    # ================================================================
    # RENDERING
    # ================================================================

    def resolve(self, message: str, *args, check_levels: bool = True) -> Optional[Text]:
        """
        Format a message and turn its tags into a styled Text.

        Args:
            message: %-style format string with inline tags
            *args: Format arguments
            check_levels: If False, disabled level tags do not drop the line

        Returns:
            Styled Text, or None if the line carries a disabled level tag
        """
        formatted = message % args if args else message
        text = Text()
        active: List[str] = []

        for index, part in enumerate(TAG_PATTERN.split(formatted)):
            if index % 2 == 0:
                if part:
                    text.append(part, style=" ".join(active) or None)
                continue

            if part in LEVEL_TAGS:
                if check_levels and not self._levels.get(part, True):
                    return None
                prefix, style = LEVEL_TAGS[part]
                text.append(prefix, style=style)
            elif part == RESET_TAG:
                active.clear()
            elif part in STYLE_TAGS:
                active.append(STYLE_TAGS[part])
            else:
                text.append(f"^{part}^", style=" ".join(active) or None)

        return text

    def render(self, text: Text, end: str = "\n") -> str:
        """Render a Text to a string (ANSI codes when on a terminal)."""
        with self.console.capture() as capture:
            self.console.print(text, end=end)
        return capture.get()

    # ================================================================
    # PRINTING
    # ================================================================

    def print(self, message: str, *args) -> None:
        """Print a line (dropped when its level is off or undecorated)."""
        self._print(message, args, "\n")

    def print_no_line(self, message: str, *args) -> None:
        """Print without a trailing line terminator."""
        self._print(message, args, "")

    def privileged(self, message: str, *args, end: str = "\n") -> None:
        """Print a line that bypasses level and decoration suppression."""
        text = self.resolve(message, *args, check_levels=False)
        if not self._decorated:
            self._emit(text.plain + end)
            return
        self._emit(self.render(text, end=end))

    def _print(self, message: str, args: Tuple, end: str) -> None:
        if not self._decorated:
            return
        text = self.resolve(message, *args)
        if text is None:
            return
        self._emit(self.render(text, end=end))

    def _emit(self, rendered: str) -> None:
        stream = sys.stdout if self._capturing else (self._stream or sys.stdout)
        if self._capturing:
            rendered = PRIVILEGED_PREFIX + rendered
        stream.write(rendered)
        stream.flush()

    # ================================================================
    # CAPTURE
    # ================================================================

    @contextmanager
    def capture(self, path: Path) -> Iterator[PrivilegedStream]:
        """
        Redirect stdout into a file while keeping this sink on the terminal.

        Args:
            path: File receiving everything tests print

        Yields:
            The PrivilegedStream installed as sys.stdout
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        delegate = self._stream or sys.stdout

        with open(path, "w", encoding="utf-8") as captured:
            stream = PrivilegedStream(delegate=delegate, capture=captured)
            with redirect_stdout(stream):
                self._capturing = True
                try:
                    yield stream
                finally:
                    self._capturing = False
