"""
Synthetic description classifier.

The runtime reports some of its own plumbing (an empty filter result,
for instance) as if it were a test. Those placeholders live under
reserved namespaces and are kept out of every count and printed line.
"""

from typing import Tuple

from epreuve.core.description import Description

SYNTHETIC_PREFIXES: Tuple[str, ...] = ("epreuve.runtime.", "unittest.")


def is_synthetic(description: Description) -> bool:
    """Check if a description is a runtime placeholder, not a user test."""
    return description.class_name.startswith(SYNTHETIC_PREFIXES)
