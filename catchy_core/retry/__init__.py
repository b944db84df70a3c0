"""
Retry Logic with Optional Exponential Backoff
=============================================
Sequential retries that end in an Outcome instead of an exception.
"""

from .policy import RetryPolicy, FailureTransform
from .executor import try_catch, try_catch_function, try_catch_void, with_retry

__all__ = [
    # Policy
    "RetryPolicy",
    "FailureTransform",
    # Executor
    "try_catch",
    "try_catch_function",
    "try_catch_void",
    "with_retry",
]
