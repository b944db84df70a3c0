"""
Scoped Resources
================
Release a resource on every exit path of the function that uses it.
"""

from contextlib import closing
from typing import Any, Callable, TypeVar

R = TypeVar("R")
T = TypeVar("T")


def auto_close(resource: R, function: Callable[[R], T]) -> T:
    """
    Call ``function(resource)`` and release ``resource`` afterwards.

    Context managers are released through ``__exit__``, anything else through
    its ``close()`` method. Either way the release happens exactly once, and an
    exception raised by ``function`` propagates after it.

    Example:
        rows = auto_close(open(path), lambda fh: fh.readlines())
    """
    manager: Any = resource if hasattr(resource, "__exit__") else closing(resource)
    with manager:
        return function(resource)
