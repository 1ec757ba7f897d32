# Rev 1.0.0
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

log = logging.getLogger(__name__)

# on_done(result, error); exactly one of the two is meaningful
Done = Callable[[Any, Optional[BaseException]], None]


class _Job(QRunnable):
    def __init__(self, runner: "BackgroundRunner", job_id: int, fn: Callable[..., Any], args: tuple):
        super().__init__()
        self._runner = runner
        self._job_id = job_id
        self._fn = fn
        self._args = args

    def run(self) -> None:
        try:
            result = self._fn(*self._args)
        except Exception as exc:
            self._runner._finished.emit(self._job_id, None, exc)
            return
        self._runner._finished.emit(self._job_id, result, None)


class BackgroundRunner(QObject):
    """
    Runs blocking backend calls on a QThreadPool.

    ``on_done`` is invoked on the thread that owns the runner (the GUI
    thread), via a queued signal, once the call returns or raises.
    """

    _finished = Signal(int, object, object)

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._ids = itertools.count(1)
        self._callbacks: Dict[int, Done] = {}
        self._finished.connect(self._deliver)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def submit(self, fn: Callable[..., Any], *args, on_done: Done) -> None:
        job_id = next(self._ids)
        self._callbacks[job_id] = on_done
        self._pool.start(_Job(self, job_id, fn, args))

    def wait(self, msecs: int = -1) -> bool:
        """Block until queued jobs have run. Results still need an event-loop turn."""
        return self._pool.waitForDone(msecs)

    @Slot(int, object, object)
    def _deliver(self, job_id: int, result: Any, error: Optional[BaseException]) -> None:
        on_done = self._callbacks.pop(job_id, None)
        if on_done is None:
            log.debug("No callback for background job #%d", job_id)
            return
        on_done(result, error)
