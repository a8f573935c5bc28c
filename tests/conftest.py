"""Shared fixtures for netglance tests."""

import os

import pytest

# Widgets are created in some tests; no display is needed
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class ImmediatePool:
    """Stand-in for QThreadPool that runs workers synchronously."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)
        worker.run()

    def waitForDone(self, msecs=-1):
        return True


class DeferredPool:
    """Stand-in for QThreadPool that holds workers until run_all()."""

    def __init__(self):
        self.pending = []

    def start(self, worker):
        self.pending.append(worker)

    def run_all(self):
        pending, self.pending = self.pending, []
        for worker in pending:
            worker.run()

    def waitForDone(self, msecs=-1):
        return True


@pytest.fixture
def immediate_pool():
    return ImmediatePool()


@pytest.fixture
def deferred_pool():
    return DeferredPool()
