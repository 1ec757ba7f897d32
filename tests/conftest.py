# Rev 1.0.0

"""Pytest fixtures for FlowDesk (Rev 1.0.0)"""
from __future__ import annotations

import os
from typing import Any, Callable, Dict, List, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication

from flowdesk.errors import BackendConnectionError, BackendWriteError
from flowdesk.models.entities import Snapshot
from flowdesk.viewmodels.dashboard_viewmodel import DashboardViewModel
from flowdesk.viewmodels.data_store import DataStore
from flowdesk.viewmodels.departments_viewmodel import DepartmentsViewModel
from flowdesk.viewmodels.members_viewmodel import MembersViewModel
from flowdesk.viewmodels.tasks_viewmodel import TasksViewModel


# --- A tiny in-memory backend just for unit tests --------------------------

class FakeSubscription:
    def __init__(self, topic: str, tables: tuple, callback: Callable[[], None]):
        self.topic = topic
        self.tables = tables
        self.callback = callback
        self.released = 0

    @property
    def active(self) -> bool:
        return self.released == 0

    def unsubscribe(self) -> None:
        if self.active:
            self.released += 1


class FakeBackend:
    """Same surface as SupabaseBackend, backed by lists of row dicts."""

    def __init__(self):
        self.rows: Dict[str, List[Dict[str, Any]]] = {
            "departments": [], "tasks": [], "subtasks": [], "comments": [], "members": [],
        }
        self.calls: List[tuple] = []
        self.subscriptions: List[FakeSubscription] = []
        self.fail_fetch = False
        self.fail_writes = False
        self.fail_subscribe = False
        self.on_fetch: Optional[Callable[[], None]] = None
        self.on_write: Optional[Callable[[tuple], None]] = None
        self.closed = 0
        self._next_id = 1000

    # reads
    def fetch_all(self) -> Snapshot:
        self.calls.append(("fetch_all",))
        hook, self.on_fetch = self.on_fetch, None
        if hook:
            hook()
        if self.fail_fetch:
            raise BackendConnectionError("offline")
        tasks = []
        for t in self.rows["tasks"]:
            row = dict(t)
            row["subtasks"] = [dict(s) for s in self.rows["subtasks"] if s["task_id"] == t["id"]]
            row["comments"] = [dict(c) for c in self.rows["comments"] if c["task_id"] == t["id"]]
            tasks.append(row)
        return Snapshot.from_rows(self.rows["departments"], tasks, self.rows["members"])

    # writes
    def insert(self, table, payload):
        self._record("insert", table, payload)
        self._next_id += 1
        row = {"id": self._next_id, **payload}
        if table == "subtasks":
            row.setdefault("done", False)
        self.rows[table].append(row)
        return [row]

    def update(self, table, row_id, payload):
        self._record("update", table, row_id, payload)
        for r in self.rows[table]:
            if r["id"] == row_id:
                r.update(payload)
                return [r]
        return []

    def delete(self, table, row_id):
        self._record("delete", table, row_id)
        self.rows[table] = [r for r in self.rows[table] if r["id"] != row_id]
        if table == "tasks":
            for child in ("subtasks", "comments"):
                self.rows[child] = [r for r in self.rows[child] if r["task_id"] != row_id]
        return []

    def _record(self, *call):
        self.calls.append(call)
        if self.on_write:
            self.on_write(call)
        if self.fail_writes:
            raise BackendWriteError(call[1], call[0], "permission denied")

    # notifications
    def subscribe(self, tables, callback, *, topic=None):
        if self.fail_subscribe:
            raise BackendConnectionError("realtime down")
        sub = FakeSubscription(topic, tuple(tables), callback)
        self.subscriptions.append(sub)
        return sub

    def close(self):
        self.closed += 1

    # helpers for assertions
    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] != "fetch_all"]

    def fetches(self) -> int:
        return sum(1 for c in self.calls if c[0] == "fetch_all")


def seed(backend: FakeBackend) -> FakeBackend:
    backend.rows["departments"] = [
        {"id": "d1", "name": "Engineering", "color": "#6366f1", "icon": "🛠", "parent_id": None},
        {"id": "d2", "name": "Backend", "color": "#22c55e", "icon": "📁", "parent_id": "d1"},
        {"id": "d3", "name": "Design", "color": "#ec4899", "icon": "🎨", "parent_id": None},
    ]
    backend.rows["tasks"] = [
        {"id": "t1", "title": "Fix login bug", "dept_id": "d2", "status": "In Progress",
         "priority": "High", "assignee": "Ana Diaz", "due_date": "2025-03-01", "tags": ["auth"]},
        {"id": "t2", "title": "Write onboarding docs", "dept_id": "d1", "status": "Not Started",
         "priority": "Low", "assignee": "Ben Ode", "due_date": None, "tags": []},
        {"id": "t3", "title": "Ship logo", "dept_id": "d3", "status": "Completed",
         "priority": "Medium", "assignee": "", "due_date": "2025-03-10", "tags": []},
        {"id": "t4", "title": "Review API limits", "dept_id": "d2", "status": "Not Started",
         "priority": "Critical", "assignee": "Ana Diaz", "due_date": None, "tags": []},
    ]
    backend.rows["subtasks"] = [
        {"id": "s1", "task_id": "t1", "title": "Reproduce", "done": False},
    ]
    backend.rows["members"] = [
        {"id": "m1", "name": "Ana Diaz"},
        {"id": "m2", "name": "Ben Ode"},
    ]
    return backend


# --- Runners standing in for the worker pool ------------------------------

class ImmediateRunner:
    """Runs each call inline and reports straight away."""

    def submit(self, fn, *args, on_done):
        try:
            result = fn(*args)
        except Exception as exc:
            on_done(None, exc)
            return
        on_done(result, None)

    def wait(self, msecs: int = -1) -> bool:
        return True


class ManualRunner:
    """Queues calls; the test decides when (and in which order) they run."""

    def __init__(self):
        self.jobs: List[tuple] = []

    def submit(self, fn, *args, on_done):
        self.jobs.append((fn, args, on_done))

    def finish(self, index: int = 0) -> None:
        fn, args, on_done = self.jobs.pop(index)
        ImmediateRunner().submit(fn, *args, on_done=on_done)

    def finish_all(self) -> None:
        while self.jobs:
            self.finish()

    def wait(self, msecs: int = -1) -> bool:
        return not self.jobs


# --- Fixtures --------------------------------------------------------------

@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def backend() -> FakeBackend:
    return seed(FakeBackend())


@pytest.fixture()
def new_store(backend) -> Callable[..., DataStore]:
    """Unstarted, unfetched store; inline runner unless one is given."""
    def _make(runner=None) -> DataStore:
        return DataStore(backend, runner or ImmediateRunner())
    return _make


@pytest.fixture()
def store(backend) -> DataStore:
    s = DataStore(backend, ImmediateRunner())
    s.fetch_all()
    backend.calls.clear()
    return s


@pytest.fixture()
def dashboard(store) -> DashboardViewModel:
    return DashboardViewModel(store)


@pytest.fixture()
def tasks_vm(store, backend, dashboard) -> TasksViewModel:
    return TasksViewModel(store, backend, dashboard)


@pytest.fixture()
def departments_vm(store, backend, dashboard) -> DepartmentsViewModel:
    return DepartmentsViewModel(store, backend, dashboard)


@pytest.fixture()
def members_vm(store, backend) -> MembersViewModel:
    return MembersViewModel(store, backend)


@pytest.fixture()
def manual_runner() -> ManualRunner:
    return ManualRunner()


@pytest.fixture()
def immediate_runner() -> ImmediateRunner:
    return ImmediateRunner()
