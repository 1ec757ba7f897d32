# tests/test_data_store.py
from __future__ import annotations

import threading

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QApplication

from flowdesk.utils.background import BackgroundRunner
from flowdesk.viewmodels.data_store import CONNECT_ERROR


def test_fetch_replaces_all_collections(new_store):
    store = new_store()
    seen = []
    store.changed.connect(lambda: seen.append(len(store.tasks)))
    store.fetch_all()
    assert [d.id for d in store.departments] == ["d1", "d2", "d3"]
    assert [m.name for m in store.members] == ["Ana Diaz", "Ben Ode"]
    assert store.task("t1").subtasks[0].title == "Reproduce"
    assert seen == [4]
    assert store.error is None


def test_fetch_is_idempotent(store):
    before = [(t.id, t.status) for t in store.tasks]
    store.fetch_all()
    store.fetch_all()
    assert [(t.id, t.status) for t in store.tasks] == before


def test_loading_stays_on_while_fetch_is_in_flight(new_store, manual_runner):
    store = new_store(manual_runner)
    states = []
    store.loadingChanged.connect(states.append)
    store.fetch_all()
    assert store.loading is True
    assert store.tasks == []
    manual_runner.finish()
    assert states == [True, False]
    assert len(store.tasks) == 4


def test_loading_covers_overlapping_fetches(new_store, manual_runner):
    store = new_store(manual_runner)
    store.fetch_all()
    store.fetch_all()
    manual_runner.finish()
    assert store.loading is True
    manual_runner.finish()
    assert store.loading is False


def test_failed_fetch_keeps_previous_data(store, backend):
    errors = []
    store.errorRaised.connect(errors.append)
    backend.fail_fetch = True
    store.fetch_all()
    assert len(store.tasks) == 4
    assert store.error == CONNECT_ERROR
    assert errors == [CONNECT_ERROR]
    assert store.loading is False


def test_error_clears_on_next_success(store, backend):
    backend.fail_fetch = True
    store.fetch_all()
    backend.fail_fetch = False
    store.fetch_all()
    assert store.error is None


def test_older_response_arriving_last_is_dropped(new_store, manual_runner, backend):
    store = new_store(manual_runner)
    store.fetch_all()
    store.fetch_all()

    backend.rows["tasks"][0]["status"] = "Completed"
    manual_runner.finish(1)           # newer fetch returns first
    backend.rows["tasks"][0]["status"] = "Review"
    manual_runner.finish(0)

    assert store.task("t1").status == "Completed"
    assert backend.fetches() == 2


def test_older_failure_after_newer_success_is_ignored(new_store, manual_runner, backend):
    store = new_store(manual_runner)
    errors = []
    store.errorRaised.connect(errors.append)
    store.fetch_all()
    store.fetch_all()
    manual_runner.finish(1)
    backend.fail_fetch = True
    manual_runner.finish(0)
    assert errors == []
    assert store.error is None


def test_in_order_responses_are_all_applied(new_store, manual_runner, backend):
    store = new_store(manual_runner)
    store.fetch_all()
    store.fetch_all()
    manual_runner.finish(0)
    assert len(store.tasks) == 4
    backend.rows["tasks"].append({"id": "t9", "title": "Late"})
    manual_runner.finish(0)
    assert store.task("t9") is not None


def test_fetch_runs_off_the_gui_thread(new_store, backend):
    store = new_store(BackgroundRunner(QThreadPool()))
    fetched_on = []
    backend.on_fetch = lambda: fetched_on.append(threading.current_thread().name)

    store.fetch_all()
    assert store.runner.wait(5000)
    # the result waits for the GUI thread's event loop
    assert store.tasks == []
    assert store.loading is True

    QApplication.processEvents()
    assert len(store.tasks) == 4
    assert store.loading is False
    assert fetched_on and fetched_on[0] != "MainThread"


def test_start_fetches_then_subscribes(new_store, backend):
    store = new_store()
    store.start()
    assert backend.fetches() == 1
    topics = {s.topic: s.tables for s in backend.subscriptions}
    assert topics == {
        "tasks-changes": ("tasks", "subtasks", "comments"),
        "dept-changes": ("departments",),
    }


def test_notification_triggers_full_refetch(new_store, backend):
    store = new_store()
    store.start()
    backend.rows["tasks"].append({"id": "t9", "title": "From elsewhere"})
    backend.subscriptions[0].callback()
    assert backend.fetches() == 2
    assert store.task("t9") is not None


def test_notification_from_another_thread_fetches_on_gui_thread(new_store, backend):
    store = new_store()
    fetched_on = []
    backend.on_fetch = lambda: fetched_on.append(threading.current_thread().name)

    t = threading.Thread(target=store.notify_changed, name="realtime-test")
    t.start()
    t.join()
    assert backend.fetches() == 0

    QApplication.processEvents()
    assert backend.fetches() == 1
    assert fetched_on == ["MainThread"]


def test_subscribe_failure_is_not_fatal(new_store, backend):
    backend.fail_subscribe = True
    store = new_store()
    store.start()
    assert len(store.tasks) == 4
    assert backend.subscriptions == []


def test_shutdown_releases_each_subscription_once(new_store, backend):
    store = new_store()
    store.start()
    subs = list(backend.subscriptions)
    store.shutdown()
    store.shutdown()
    assert [s.released for s in subs] == [1, 1]
    assert backend.closed == 1


def test_subscriptions_landing_after_shutdown_are_released(new_store, manual_runner, backend):
    store = new_store(manual_runner)
    store.start()
    store.shutdown()
    manual_runner.finish_all()
    assert len(backend.subscriptions) == 2
    assert all(s.released == 1 for s in backend.subscriptions)
