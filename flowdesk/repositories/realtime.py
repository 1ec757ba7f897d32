# Rev 1.0.0
"""Supabase Realtime on a background thread.

supabase-py only speaks realtime through its async client, while the rest of
the app is a Qt GUI loop. The listener owns a daemon thread running its own
asyncio loop; public methods are plain blocking calls that hop onto that loop.
Callbacks fire on the realtime thread, so callers must marshal them back to
their own thread (the data store does this through a Qt signal).
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Iterable, Optional

from supabase import acreate_client

log = logging.getLogger(__name__)


class RealtimeListener:
    def __init__(self, url: str, key: str, *, timeout: float = 10.0, client_factory=None):
        self._url = url
        self._key = key
        self._timeout = timeout
        self._factory = client_factory or acreate_client
        self._client: Any = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    # ---- public API (called from pool workers) ----
    def join(self, topic: str, tables: Iterable[str], callback: Callable[[], None]) -> Any:
        """Subscribe to every change on ``tables``; returns the channel."""
        return self._call(self._join(topic, tuple(tables), callback))

    def leave(self, channel: Any) -> None:
        self._call(self._leave(channel))

    def close(self) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None:
            return
        if self._client is not None:
            fut = asyncio.run_coroutine_threadsafe(self._client.remove_all_channels(), loop)
            try:
                fut.result(timeout=self._timeout)
            except Exception:
                log.warning("Realtime channels did not close cleanly", exc_info=True)
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=self._timeout)
        self._client = None
        log.info("Realtime listener stopped")

    @property
    def running(self) -> bool:
        return self._loop is not None

    # ---- loop plumbing ----
    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._run, args=(self._loop,), name="flowdesk-realtime", daemon=True
                )
                self._thread.start()
            return self._loop

    @staticmethod
    def _run(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            loop.close()

    def _call(self, coro):
        fut = asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())
        return fut.result(timeout=self._timeout)

    # ---- coroutines (realtime thread) ----
    async def _get_client(self):
        if self._client is None:
            self._client = await self._factory(self._url, self._key)
        return self._client

    async def _join(self, topic: str, tables: tuple, callback: Callable[[], None]):
        client = await self._get_client()
        channel = client.channel(topic)

        def _on_change(payload: dict) -> None:
            log.debug("Change on %s: %s", topic, (payload or {}).get("eventType", "?"))
            callback()

        for table in tables:
            channel.on_postgres_changes("*", schema="public", table=table, callback=_on_change)
        await channel.subscribe()
        log.info("Subscribed %s to %s", topic, ", ".join(tables))
        return channel

    async def _leave(self, channel) -> None:
        if self._client is not None:
            await self._client.remove_channel(channel)
