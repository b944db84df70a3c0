"""
Catchy Exceptions
=================
Exception classes raised by the raising entry points.
"""

from typing import Optional


class TryBlockError(Exception):
    """Raised when a wrapped block fails and the caller asked for an exception."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause

    @classmethod
    def wrap(cls, cause: BaseException) -> "TryBlockError":
        return cls(f"{type(cause).__name__}: {cause}", cause=cause)


class RetryInterruptedError(TryBlockError):
    """Raised when the wait between attempts is interrupted."""
    pass
