# tests/test_main_window.py
from __future__ import annotations

import pytest

from flowdesk.app_context import AppContext
from flowdesk.ui.main_window import MainWindow
from flowdesk.utils.config import BackendConfig


@pytest.fixture()
def ctx(backend, immediate_runner, monkeypatch, tmp_path):
    monkeypatch.setattr("flowdesk.ui.diagnostics_dock.log_file", lambda: tmp_path / "flowdesk.log")
    return AppContext.create(config=BackendConfig(url="u", key="k"), backend=backend,
                             runner=immediate_runner)


@pytest.fixture()
def win(ctx):
    w = MainWindow(ctx, settings={})
    yield w
    w.deleteLater()


def test_views_show_after_first_fetch(win, ctx):
    ctx.start()
    assert win._stack.currentWidget() is win._list
    assert win._lbl_counts.text() == "1/4 tasks completed"


def test_initial_fetch_failure_shows_error_page(win, ctx, backend):
    backend.fail_fetch = True
    ctx.start()
    assert win._stack.currentWidget() is win._err_host
    assert "Could not connect to database" in win._error_page.text()


def test_later_fetch_failure_replaces_loaded_views(win, ctx, backend):
    ctx.start()
    backend.fail_fetch = True
    ctx.store.notify_changed()
    assert ctx.store.error is not None
    assert win._stack.currentWidget() is win._err_host

    # filter changes do not bring stale views back
    ctx.dashboard.set_search("login")
    assert win._stack.currentWidget() is win._err_host


def test_successful_retry_restores_views(win, ctx, backend):
    backend.fail_fetch = True
    ctx.start()
    backend.fail_fetch = False
    ctx.store.fetch_all()
    assert win._stack.currentWidget() is win._list
