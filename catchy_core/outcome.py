"""
Outcome Container
=================
Immutable success-or-failure value with chainable combinators.

Usage:
    from catchy_core import try_catch

    try_catch(lambda: fetch_quota(account_id), max_retries=2) \\
        .map(lambda quota: quota.remaining) \\
        .recover_with_value(0) \\
        .on_success(render)
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

import structlog

from .classification import Classifier, classify_failure

logger = structlog.get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_FAILURE_MESSAGE = "Operation failed"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a wrapped operation: either a value or the exception that ended it.

    Build instances with ``Outcome.success`` / ``Outcome.failure``. Nothing
    here raises except ``get()``; exceptions thrown by callbacks passed to
    ``map`` and ``recover`` become the failure of the returned Outcome.
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None

    def __post_init__(self):
        if self.error is None:
            return
        if not isinstance(self.error, BaseException):
            raise TypeError(
                f"Outcome error must be an exception, got {type(self.error).__name__}"
            )
        if self.value is not None:
            raise ValueError("Outcome cannot hold both a value and an error")

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome[T]":
        if error is None:
            raise TypeError("Outcome.failure() requires an exception")
        return cls(error=error)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_success(self) -> bool:
        return self.error is None

    def is_failure(self) -> bool:
        return self.error is not None

    def get(self) -> T:
        """Return the value, re-raising the held exception on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def or_else(self, default: T) -> T:
        return default if self.is_failure() else self.value

    # -------------------------------------------------------------------------
    # Side effects
    # -------------------------------------------------------------------------

    def on_success(self, handler: Callable[[T], Any]) -> "Outcome[T]":
        if self.is_success():
            self._run_handler(handler, self.value)
        return self

    def on_failure(self, handler: Callable[[BaseException], Any]) -> "Outcome[T]":
        if self.is_failure():
            self._run_handler(handler, self.error)
        return self

    def _run_handler(self, handler: Callable[[Any], Any], argument: Any) -> None:
        try:
            handler(argument)
        except Exception as e:
            logger.warning(
                "Outcome handler raised",
                handler=getattr(handler, "__name__", repr(handler)),
                error=str(e),
                exc_info=e,
            )

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[T], U]) -> "Outcome[U]":
        """
        Apply ``fn`` to the value.

        A failure is carried over unchanged and ``fn`` is not called. If ``fn``
        raises, the returned Outcome holds that exception.
        """
        if self.is_failure():
            return Outcome.failure(self.error)
        try:
            return Outcome.success(fn(self.value))
        except Exception as e:
            return Outcome.failure(e)

    def recover(self, supplier: Callable[[], T]) -> "Outcome[T]":
        """
        Replace a failure with the value produced by ``supplier``.

        If the supplier raises, its exception replaces the original one.
        """
        if self.is_success():
            return self
        try:
            return Outcome.success(supplier())
        except Exception as e:
            return Outcome.failure(e)

    def recover_with_value(self, fallback: T) -> "Outcome[T]":
        if self.is_success():
            return self
        return Outcome.success(fallback)

    def recover_with_message(self, message: str) -> "Outcome[Union[T, str]]":
        """
        Replace a failure with a text value.

        Only meaningful for text outcomes: nothing stops this being called on
        an ``Outcome[int]``, which then holds a ``str``. Prefer
        ``recover_with_value`` elsewhere.
        """
        if self.is_success():
            return self
        return Outcome.success(message)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    def log_if_failure(
        self,
        log: Any,
        message: str = DEFAULT_FAILURE_MESSAGE,
        auto_level: bool = True,
        level: Optional[str] = None,
        classifier: Classifier = classify_failure,
    ) -> "Outcome[T]":
        """
        Log the held exception, if any.

        Args:
            log: structlog or stdlib logger
            message: Log message
            auto_level: Pick the level from the failure category
            level: Explicit logger method name ("warning", "info", ...),
                takes precedence over auto_level
            classifier: Maps the exception to a FailureCategory

        Returns:
            This Outcome, unchanged
        """
        if self.is_success():
            return self
        if level is None:
            level = self._classified_level(classifier) if auto_level else "error"
        getattr(log, level)(message, exc_info=self.error)
        return self

    def _classified_level(self, classifier: Classifier) -> str:
        try:
            return classifier(self.error).log_level
        except Exception as e:
            logger.warning(
                "Failure classifier raised",
                classifier=getattr(classifier, "__name__", repr(classifier)),
                error=str(e),
                exc_info=e,
            )
            return "error"

    def log_warning_if_failure(
        self, log: Any, message: str = DEFAULT_FAILURE_MESSAGE
    ) -> "Outcome[T]":
        return self.log_if_failure(log, message, level="warning")

    def log_info_if_failure(
        self, log: Any, message: str = DEFAULT_FAILURE_MESSAGE
    ) -> "Outcome[T]":
        return self.log_if_failure(log, message, level="info")
