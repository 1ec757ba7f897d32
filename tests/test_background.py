# tests/test_background.py
from __future__ import annotations

import threading

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QApplication

from flowdesk.errors import BackendWriteError
from flowdesk.utils.background import BackgroundRunner


def _run(runner, fn, *args):
    seen = []
    runner.submit(fn, *args, on_done=lambda result, error: seen.append(
        (result, error, threading.current_thread().name)))
    assert runner.wait(5000)
    QApplication.processEvents()
    return seen


def test_result_is_delivered_on_the_owner_thread():
    runner = BackgroundRunner(QThreadPool())
    seen = _run(runner, lambda: threading.current_thread().name)
    assert len(seen) == 1
    worker_name, error, delivered_on = seen[0]
    assert worker_name != "MainThread"
    assert error is None
    assert delivered_on == "MainThread"
    assert runner.pending == 0


def test_exception_is_passed_to_the_callback():
    def _boom():
        raise BackendWriteError("tasks", "insert", "permission denied")

    seen = _run(BackgroundRunner(QThreadPool()), _boom)
    result, error, _ = seen[0]
    assert result is None
    assert isinstance(error, BackendWriteError)


def test_arguments_are_forwarded():
    seen = _run(BackgroundRunner(QThreadPool()), lambda a, b: a + b, 2, 3)
    assert seen[0][0] == 5
