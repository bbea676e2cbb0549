"""
Symbol definitions for test progress and CLI messages.

Usage:
    >>> from epreuve.reporter.emojis import EpreuveEmoji
    >>> EpreuveEmoji.SUCCESS
    '✓'
"""

from typing import Dict, List


class ComponentEmoji:
    """
    Base class for symbol collections.

    Class attributes define symbols as constants; no instances needed.
    """

    @classmethod
    def get_all(cls) -> Dict[str, str]:
        """
        Get all symbol definitions from this category.

        Returns:
            Dictionary mapping symbol name to symbol character
        """
        return {
            name: value
            for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str)
        }

    @classmethod
    def list_names(cls) -> List[str]:
        """Get list of all symbol names in this category."""
        return [
            name for name in dir(cls) if not name.startswith("_") and name.isupper()
        ]


class EpreuveEmoji(ComponentEmoji):
    """
    Test progress and CLI symbols.

    Categories:
        - Outcomes: per-test result markers
        - CLI: log line decorations
    """

    # ============================================================
    # Outcomes
    # ============================================================
    SUCCESS = "✓"  # Test passed
    FAILURE = "☠"  # Test failed
    IGNORED = "⚠"  # Test ignored

    # ============================================================
    # CLI
    # ============================================================
    TEST_RUN = "🔬"  # Runner active
    DISCOVER = "🔍"  # Discovery
    TEST_ERROR = "💥"  # Fatal error
    STOPPED = "⏹️"  # Interrupted
    WARNING = "⚠️"  # Warning
