"""Output sink, symbols and diagnostic logging."""

from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.output import PRIVILEGED_PREFIX, Output, PrivilegedStream
from epreuve.reporter.system_reporter import SystemReporter

__all__ = [
    "EpreuveEmoji",
    "Output",
    "PrivilegedStream",
    "PRIVILEGED_PREFIX",
    "SystemReporter",
]
