# Rev 1.0.0
from __future__ import annotations

import logging
from typing import Any, List, Optional

from PySide6.QtCore import QObject, Signal

from flowdesk.errors import BackendConnectionError
from flowdesk.models.entities import Department, Member, Snapshot, Task
from flowdesk.utils.background import BackgroundRunner

log = logging.getLogger(__name__)

CONNECT_ERROR = "Could not connect to database. Check your Supabase credentials in .env"

# (topic, tables) pairs; members are only refreshed as a side effect of other changes
WATCHED = (
    ("tasks-changes", ("tasks", "subtasks", "comments")),
    ("dept-changes", ("departments",)),
)


# in-flight backend calls get this long to finish at shutdown
SHUTDOWN_WAIT_MS = 5000


class DataStore(QObject):
    """
    Client-side copy of the whole backend, replaced in full on every fetch.

    Fetches and subscribes run on ``runner`` (a worker pool by default) and
    their results come back on the GUI thread. Every fetch takes a ticket;
    a result older than the last applied one is dropped, so the newest
    issued fetch wins when responses arrive out of order.

    Emits:
      - changed()              after a successful fetch
      - loadingChanged(bool)   True while any fetch is in flight
      - errorRaised(str)       persistent until the next successful fetch
    """

    changed = Signal()
    loadingChanged = Signal(bool)
    errorRaised = Signal(str)
    # realtime callbacks arrive on another thread; this hops them onto ours
    _notified = Signal()

    def __init__(self, backend, runner=None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._backend = backend
        self._runner = runner or BackgroundRunner(parent=self)
        self._snapshot = Snapshot()
        self._loading = False
        self._error: Optional[str] = None
        self._issued = 0
        self._applied = 0
        self._in_flight = 0
        self._subscriptions: List[Any] = []
        self._shut_down = False
        self._notified.connect(self.fetch_all)

    # ---- state ----
    @property
    def runner(self):
        return self._runner

    @property
    def departments(self) -> List[Department]:
        return self._snapshot.departments

    @property
    def tasks(self) -> List[Task]:
        return self._snapshot.tasks

    @property
    def members(self) -> List[Member]:
        return self._snapshot.members

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    def task(self, task_id: Any) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    # ---- lifecycle ----
    def start(self) -> None:
        self.fetch_all()
        self._runner.submit(self._subscribe_all, on_done=self._on_subscribed)

    def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        if not self._runner.wait(SHUTDOWN_WAIT_MS):
            log.warning("Backend calls still running at shutdown")
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
        self._backend.close()
        log.info("DataStore shut down")

    def notify_changed(self) -> None:
        """Change-notification entry point; safe to call from any thread."""
        self._notified.emit()

    def _subscribe_all(self) -> List[Any]:
        # worker thread
        subs = []
        for topic, tables in WATCHED:
            try:
                subs.append(self._backend.subscribe(tables, self.notify_changed, topic=topic))
            except BackendConnectionError as exc:
                log.warning("Live updates unavailable for %s: %s", topic, exc)
        return subs

    def _on_subscribed(self, subs: Optional[List[Any]], error: Optional[BaseException]) -> None:
        if error is not None:
            log.error("Subscribing to live updates failed: %s", error)
            return
        if self._shut_down:
            for sub in subs:
                sub.unsubscribe()
            return
        self._subscriptions.extend(subs)

    # ---- queries ----
    def fetch_all(self) -> int:
        """Start a full fetch and return its ticket."""
        self._issued += 1
        ticket = self._issued
        self._in_flight += 1
        self._set_loading(True)
        self._runner.submit(
            self._backend.fetch_all,
            on_done=lambda snapshot, error: self._on_fetched(ticket, snapshot, error),
        )
        return ticket

    def _on_fetched(self, ticket: int, snapshot: Optional[Snapshot], error: Optional[BaseException]) -> None:
        self._in_flight -= 1
        self._set_loading(self._in_flight > 0)
        if ticket < self._applied:
            log.debug("Dropping stale fetch #%d (already applied #%d)", ticket, self._applied)
            return
        if error is not None:
            if isinstance(error, BackendConnectionError):
                log.error("Full fetch #%d failed: %s", ticket, error)
            else:
                log.error("Full fetch #%d failed unexpectedly", ticket, exc_info=error)
            self._error = CONNECT_ERROR
            self.errorRaised.emit(self._error)
            return
        self._applied = ticket
        self._snapshot = snapshot
        self._error = None
        self.changed.emit()

    def _set_loading(self, value: bool) -> None:
        if self._loading != value:
            self._loading = value
            self.loadingChanged.emit(value)
