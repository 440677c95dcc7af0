import threading
import time

import pytest

from core.action_runner import ActionResult
from core.exceptions import ConfigLoadError
from core.process_scanner import ProcessScanner
from core.watchdog import Watchdog


class FakeScanner(ProcessScanner):
    """Scanner whose process table is whatever the test puts in `running`."""

    def __init__(self, running=(), max_failures=3):
        super().__init__(min_interval=0, max_failures=max_failures)
        self.running = set(running)
        self.fail = False
        self.calls = 0

    def _enumerate(self):
        self.calls += 1
        if self.fail:
            raise OSError("process table unavailable")
        return [(name, [name]) for name in self.running]


class StaticLoader:
    def __init__(self, entries=None):
        self.entries = list(entries or [])
        self.error = None

    def __call__(self):
        if self.error is not None:
            raise ConfigLoadError(self.error)
        return list(self.entries)


class RecordingRunner:
    def __init__(self):
        self.calls = []
        self.raise_for = set()
        self._lock = threading.Lock()

    def __call__(self, commands, label=None, timeout=None):
        with self._lock:
            self.calls.append((label, list(commands)))
        if label in self.raise_for:
            raise ValueError(f"cannot run commands for {label}")
        return ActionResult(label)

    def count(self, label):
        with self._lock:
            return sum(1 for call_label, _ in self.calls if call_label == label)

    def labels(self):
        with self._lock:
            return [label for label, _ in self.calls]


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def scanner():
    return FakeScanner()


@pytest.fixture
def loader():
    return StaticLoader()


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def watchdog(loader, scanner, runner):
    wd = Watchdog(loader, scanner, poll_interval=0.05, runner=runner, shutdown_timeout=5)
    yield wd
    wd.stop(timeout=5)
