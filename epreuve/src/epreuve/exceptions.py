"""
Epreuve exceptions.

Test failures are never raised; these cover conditions that abort a run.
"""


class EpreuveError(Exception):
    """Base exception for epreuve errors."""


class RunnerError(EpreuveError):
    """
    Raised when the execution runtime itself fails.

    Distinct from a failing test: a test failure is recorded in the
    aggregate result, a runner error aborts the invocation.
    """

    def __init__(self, message: str, cause: Exception = None):
        """
        Initialize runner error.

        Args:
            message: Error message
            cause: Underlying exception raised by the runtime
        """
        self.message = message
        self.cause = cause
        super().__init__(self.message)


class ConfigurationError(EpreuveError):
    """Raised when settings or the config file are invalid."""

    def __init__(self, message: str, path: str = None):
        """Initialize configuration error."""
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message)


class DiscoveryError(EpreuveError):
    """Raised when a test module cannot be imported in strict mode."""

    def __init__(self, target: str, cause: Exception):
        """Initialize discovery error."""
        self.target = target
        self.cause = cause
        super().__init__(
            f"Failed to import {target}: {type(cause).__name__}: {cause}"
        )
