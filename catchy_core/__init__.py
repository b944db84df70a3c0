"""
Catchy Core Library
===================
Run fallible operations with retries and get an Outcome back.
"""

__version__ = "0.1.0"

# Outcome
from catchy_core.outcome import Outcome

# Retry
from catchy_core.retry import (
    RetryPolicy,
    try_catch,
    try_catch_function,
    try_catch_void,
    with_retry,
)

# Classification
from catchy_core.classification import FailureCategory, classify_failure

# Exceptions
from catchy_core.exceptions import TryBlockError, RetryInterruptedError

# Resources
from catchy_core.resources import auto_close

__all__ = [
    "__version__",
    # Outcome
    "Outcome",
    # Retry
    "RetryPolicy",
    "try_catch",
    "try_catch_function",
    "try_catch_void",
    "with_retry",
    # Classification
    "FailureCategory",
    "classify_failure",
    # Exceptions
    "TryBlockError",
    "RetryInterruptedError",
    # Resources
    "auto_close",
]
