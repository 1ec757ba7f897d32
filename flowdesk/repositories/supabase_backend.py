# Rev 1.0.0
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import create_client
from supabase.client import ClientOptions

from flowdesk.errors import BackendConnectionError, BackendWriteError, FlowDeskError
from flowdesk.models.entities import Snapshot
from flowdesk.models.types import TABLES, Table
from flowdesk.repositories.realtime import RealtimeListener
from flowdesk.utils.config import BackendConfig

log = logging.getLogger(__name__)

# nested select pulls subtasks + comments with their task in one round trip
TASKS_SELECT = "*, subtasks(*), comments(*)"


def _default_client(config: BackendConfig):
    return create_client(
        config.url,
        config.key,
        options=ClientOptions(postgrest_client_timeout=config.timeout),
    )


class Subscription:
    """Handle for one realtime channel; ``unsubscribe`` is idempotent."""

    def __init__(self, backend: "SupabaseBackend", topic: str, tables: tuple, channel: Any):
        self._backend = backend
        self.topic = topic
        self.tables = tables
        self.channel = channel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._backend._release(self)


class SupabaseBackend:
    """
    Store adapter over a Supabase project.

    Exposes:
      fetch_all() -> Snapshot
      insert(table, payload) -> list[dict]
      update(table, row_id, payload) -> list[dict]
      delete(table, row_id) -> list[dict]
      subscribe(tables, callback, topic=...) -> Subscription
      unsubscribe_all(), close()

    The HTTP client is built on first use so a missing or bad URL/key shows
    up as a connection error at the first fetch instead of at startup.
    """

    def __init__(self, config: BackendConfig, *, client_factory: Optional[Callable] = None,
                 realtime: Optional[RealtimeListener] = None):
        self._config = config
        self._factory = client_factory or _default_client
        self._client = None
        self._realtime = realtime
        self._subscriptions: List[Subscription] = []
        # calls arrive from several pool workers at once
        self._lock = threading.RLock()

    # -------------------------
    # Connection handling
    # -------------------------
    def _conn(self):
        with self._lock:
            if self._client is not None:
                return self._client
            if not self._config.is_complete:
                raise BackendConnectionError("Supabase URL and key are not configured")
            try:
                self._client = self._factory(self._config)
            except Exception as exc:
                # create_client validates url/key shape and raises its own exception type
                raise BackendConnectionError(f"Could not create Supabase client: {exc}") from exc
            return self._client

    def _listener(self) -> RealtimeListener:
        with self._lock:
            if self._realtime is None:
                if not self._config.is_complete:
                    raise BackendConnectionError("Supabase URL and key are not configured")
                self._realtime = RealtimeListener(self._config.url, self._config.key, timeout=self._config.timeout)
            return self._realtime

    # -------------------------
    # Reads
    # -------------------------
    def fetch_all(self) -> Snapshot:
        """All departments, tasks (with subtasks/comments) and members, or nothing."""
        client = self._conn()
        try:
            depts = client.table("departments").select("*").order("created_at").execute()
            tasks = client.table("tasks").select(TASKS_SELECT).order("created_at").execute()
            members = client.table("members").select("*").order("name").execute()
        except Exception as exc:
            log.error("fetch_all failed: %s", exc)
            raise BackendConnectionError(str(exc)) from exc

        snap = Snapshot.from_rows(depts.data, tasks.data, members.data)
        log.debug("fetch_all: %d departments, %d tasks, %d members",
                  len(snap.departments), len(snap.tasks), len(snap.members))
        return snap

    # -------------------------
    # Writes
    # -------------------------
    def insert(self, table: Table, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._write(table, "insert", lambda q: q.insert(payload))

    def update(self, table: Table, row_id: Any, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._write(table, "update", lambda q: q.update(payload).eq("id", row_id))

    def delete(self, table: Table, row_id: Any) -> List[Dict[str, Any]]:
        return self._write(table, "delete", lambda q: q.delete().eq("id", row_id))

    def _write(self, table: Table, action: str, build) -> List[Dict[str, Any]]:
        if table not in TABLES:
            raise BackendWriteError(table, action, "unknown table")
        try:
            resp = build(self._conn().table(table)).execute()
        except APIError as exc:
            raise BackendWriteError(table, action, exc.message or str(exc)) from exc
        except (httpx.HTTPError, FlowDeskError) as exc:
            raise BackendWriteError(table, action, str(exc)) from exc
        log.info("%s on %s ok", action, table)
        return list(resp.data or [])

    # -------------------------
    # Change notifications
    # -------------------------
    def subscribe(self, tables: Iterable[Table], callback: Callable[[], None], *, topic: Optional[str] = None) -> Subscription:
        tables = tuple(tables)
        topic = topic or f"{'-'.join(tables)}-changes"
        try:
            channel = self._listener().join(topic, tables, callback)
        except FlowDeskError:
            raise
        except Exception as exc:
            raise BackendConnectionError(f"Realtime subscribe failed: {exc}") from exc
        sub = Subscription(self, topic, tables, channel)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def _release(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
        if self._realtime is None:
            return
        try:
            self._realtime.leave(sub.channel)
        except Exception:
            log.warning("Could not remove channel %s", sub.topic, exc_info=True)

    def unsubscribe_all(self) -> None:
        for sub in list(self._subscriptions):
            sub.unsubscribe()

    def close(self) -> None:
        self.unsubscribe_all()
        if self._realtime is not None:
            self._realtime.close()
