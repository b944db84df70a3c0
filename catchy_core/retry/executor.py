"""
Retry Executor
==============
Run a fallible operation up to ``max_retries + 1`` times and wrap the
result in an Outcome.
"""

import threading
import time
from dataclasses import replace
from functools import partial, wraps
from typing import Any, Callable, Optional, TypeVar

import structlog
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from ..exceptions import RetryInterruptedError, TryBlockError
from ..outcome import Outcome
from .policy import FailureTransform, RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")
V = TypeVar("V")

Sleep = Callable[[float], Any]


class _Waiter:
    """
    Sleep between attempts, raising InterruptedError when cancelled.

    With a cancel event the wait happens on ``Event.wait`` and ``sleep`` is
    not used.
    """

    def __init__(self, sleep: Sleep, cancel_event: Optional[threading.Event]):
        self.sleep = sleep
        self.cancel_event = cancel_event

    def __call__(self, seconds: float) -> None:
        if self.cancel_event is not None:
            if self.cancel_event.wait(seconds):
                raise InterruptedError("retry wait cancelled")
            return
        if seconds > 0:
            self.sleep(seconds)


def _name_of(func: Callable[..., Any]) -> str:
    return getattr(func, "__name__", repr(func))


def _log_retry(func_name: str, retry_state: RetryCallState) -> None:
    logger.warning(
        "Retrying after failure",
        func=func_name,
        attempt=retry_state.attempt_number,
        delay=retry_state.next_action.sleep if retry_state.next_action else 0,
        error=str(retry_state.outcome.exception()),
    )


def _resolve_policy(
    policy: Optional[RetryPolicy],
    max_retries: Optional[int],
    base_delay: Optional[float],
    use_exponential_backoff: Optional[bool],
    failure_transform: Optional[FailureTransform],
) -> RetryPolicy:
    """Explicit keyword arguments override fields of ``policy``."""
    overrides = {
        name: value
        for name, value in (
            ("max_retries", max_retries),
            ("base_delay", base_delay),
            ("use_exponential_backoff", use_exponential_backoff),
            ("failure_transform", failure_transform),
        )
        if value is not None
    }
    policy = policy or RetryPolicy()
    return replace(policy, **overrides) if overrides else policy


def _retrying(
    policy: RetryPolicy,
    sleep: Sleep,
    cancel_event: Optional[threading.Event],
    func_name: str,
) -> Retrying:
    return Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait_strategy(),
        retry=retry_if_exception_type(Exception),
        sleep=_Waiter(sleep, cancel_event),
        before_sleep=partial(_log_retry, func_name),
        reraise=False,
    )


class _Interrupted(Exception):
    def __init__(self, last_error: Exception):
        super().__init__(str(last_error))
        self.last_error = last_error


def _run(
    call: Callable[[], T],
    policy: RetryPolicy,
    sleep: Sleep,
    cancel_event: Optional[threading.Event],
    name: str,
) -> Outcome[T]:
    """
    Attempt loop shared by every entry point.

    Returns a success Outcome, or a failure Outcome holding the last
    (untransformed) exception. Raises _Interrupted when the wait is cancelled.
    """
    last_error: Optional[Exception] = None
    try:
        for attempt in _retrying(policy, sleep, cancel_event, name):
            with attempt:
                try:
                    return Outcome.success(call())
                except Exception as e:
                    last_error = e
                    raise
    except RetryError as e:
        last_error = e.last_attempt.exception()
    except InterruptedError:
        logger.warning("Retry interrupted", error=str(last_error))
        raise _Interrupted(last_error)

    logger.debug(
        "Retry exhausted",
        func=name,
        attempts=policy.max_attempts,
        error=str(last_error),
    )
    return Outcome.failure(last_error)


def _transformed(policy: RetryPolicy, error: Exception) -> Exception:
    if policy.failure_transform is None:
        return error
    try:
        transformed = policy.failure_transform(error)
        if not isinstance(transformed, BaseException):
            raise TypeError(
                f"failure_transform returned {type(transformed).__name__}, expected an exception"
            )
        return transformed
    except Exception as e:
        logger.warning("Failure transform raised", error=str(e), original=str(error))
        return e


def _outcome(
    call: Callable[[], T],
    policy: RetryPolicy,
    sleep: Sleep,
    cancel_event: Optional[threading.Event],
    name: str,
) -> Outcome[T]:
    try:
        outcome = _run(call, policy, sleep, cancel_event, name)
    except _Interrupted as e:
        return Outcome.failure(_transformed(policy, e.last_error))
    if outcome.is_success():
        return outcome
    return Outcome.failure(_transformed(policy, outcome.error))


def try_catch(
    operation: Callable[[], T],
    *,
    policy: Optional[RetryPolicy] = None,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    use_exponential_backoff: Optional[bool] = None,
    failure_transform: Optional[FailureTransform] = None,
    sleep: Sleep = time.sleep,
    cancel_event: Optional[threading.Event] = None,
) -> Outcome[T]:
    """
    Execute ``operation`` with retries and wrap the result.

    Args:
        operation: Zero-argument callable to execute
        policy: Base RetryPolicy (defaults to a single attempt)
        max_retries: Attempts after the first one
        base_delay: Seconds to wait after a failed attempt
        use_exponential_backoff: Double the delay after each failed attempt
        failure_transform: Rewrites the final exception
        sleep: Blocking sleep used between attempts, ignored when
            cancel_event is given
        cancel_event: Setting it during a wait stops retrying; the wait
            itself is done with ``cancel_event.wait``

    Returns:
        Outcome holding the operation's return value or its last exception.
        Never raises for an ``Exception``.
    """
    policy = _resolve_policy(
        policy, max_retries, base_delay, use_exponential_backoff, failure_transform
    )
    return _outcome(operation, policy, sleep, cancel_event, _name_of(operation))


def try_catch_function(
    input_value: V,
    function: Callable[[V], T],
    *,
    policy: Optional[RetryPolicy] = None,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    use_exponential_backoff: Optional[bool] = None,
    failure_transform: Optional[FailureTransform] = None,
    sleep: Sleep = time.sleep,
    cancel_event: Optional[threading.Event] = None,
) -> Outcome[T]:
    """Like ``try_catch``, passing ``input_value`` to ``function`` on every attempt."""
    policy = _resolve_policy(
        policy, max_retries, base_delay, use_exponential_backoff, failure_transform
    )

    return _outcome(
        partial(function, input_value), policy, sleep, cancel_event, _name_of(function)
    )


def try_catch_void(
    procedure: Callable[..., Any],
    *args,
    policy: Optional[RetryPolicy] = None,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    use_exponential_backoff: Optional[bool] = None,
    failure_transform: Optional[FailureTransform] = None,
    sleep: Sleep = time.sleep,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """
    Execute ``procedure(*args)`` with retries, raising when it keeps failing.

    Meant for procedures that update the objects they are given in place
    and have nothing to return.

    Raises:
        TryBlockError: All attempts failed; ``cause`` is the transformed
            last exception
        RetryInterruptedError: The wait was cancelled; ``cause`` is the last
            exception as raised by the procedure
    """
    policy = _resolve_policy(
        policy, max_retries, base_delay, use_exponential_backoff, failure_transform
    )

    try:
        outcome = _run(
            partial(procedure, *args), policy, sleep, cancel_event, _name_of(procedure)
        )
    except _Interrupted as e:
        raise RetryInterruptedError(
            f"Retry interrupted after {type(e.last_error).__name__}: {e.last_error}",
            cause=e.last_error,
        )
    if outcome.is_failure():
        raise TryBlockError.wrap(_transformed(policy, outcome.error))


def with_retry(
    policy: Optional[RetryPolicy] = None,
    *,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    use_exponential_backoff: Optional[bool] = None,
    failure_transform: Optional[FailureTransform] = None,
    sleep: Sleep = time.sleep,
    cancel_event: Optional[threading.Event] = None,
):
    """
    Decorator returning an Outcome from every call of the wrapped function.

    Usage:
        @with_retry(max_retries=3, base_delay=0.5, use_exponential_backoff=True)
        def load_template(name):
            ...

        load_template("welcome").or_else(DEFAULT_TEMPLATE)
    """
    resolved = _resolve_policy(
        policy, max_retries, base_delay, use_exponential_backoff, failure_transform
    )

    def decorator(func: Callable[..., T]) -> Callable[..., Outcome[T]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Outcome[T]:
            return _outcome(
                partial(func, *args, **kwargs), resolved, sleep, cancel_event, _name_of(func)
            )
        return wrapper
    return decorator
