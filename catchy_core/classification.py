"""
Failure Classification
======================
Closed set of failure categories used to pick a log level.
"""

from enum import Enum
from typing import Callable


class FailureCategory(str, Enum):
    """Failure categories."""
    MISUSE = "misuse"              # Bad arguments, None where a value was expected
    RUNTIME = "runtime"            # Unexpected failures inside the operation
    OPERATIONAL = "operational"    # Declared failures of the underlying I/O

    @property
    def log_level(self) -> str:
        """Name of the logger method used for this category."""
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    FailureCategory.MISUSE: "warning",
    FailureCategory.RUNTIME: "error",
    FailureCategory.OPERATIONAL: "info",
}

# AttributeError covers the usual "'NoneType' object has no attribute" case
MISUSE_ERRORS = (TypeError, ValueError, AttributeError)
OPERATIONAL_ERRORS = (OSError,)

Classifier = Callable[[BaseException], FailureCategory]


def classify_failure(error: BaseException) -> FailureCategory:
    """
    Map an exception to its failure category.

    Args:
        error: The failure cause held by an Outcome

    Returns:
        MISUSE for argument and None-reference errors, OPERATIONAL for
        OSError and its subclasses, RUNTIME for everything else.
    """
    if isinstance(error, MISUSE_ERRORS):
        return FailureCategory.MISUSE
    if isinstance(error, OPERATIONAL_ERRORS):
        return FailureCategory.OPERATIONAL
    return FailureCategory.RUNTIME
