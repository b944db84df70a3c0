import logging

import pytest
import structlog


class RecordingSleep:
    """Stands in for time.sleep and remembers every requested delay."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)

    @property
    def total(self):
        return sum(self.delays)


class Flaky:
    """Operation failing a given number of times before returning a value."""

    def __init__(self, failures, value="success", error_factory=lambda: ValueError("boom")):
        self.failures = failures
        self.value = value
        self.error_factory = error_factory
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error_factory()
        return self.value


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def flaky():
    return Flaky


@pytest.fixture(autouse=True)
def reset_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
