# Rev 1.0.0
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from flowdesk.errors import BackendWriteError

log = logging.getLogger(__name__)


class CrudViewModel(QObject):
    """
    Shared write path: the backend call runs on the store's runner, failures
    are reported through ``writeFailed`` and every finished write is followed
    by a full re-fetch, which also undoes optimistic patches that did not land.
    """

    writeFailed = Signal(str)

    def __init__(self, store, backend, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._backend = backend

    def _write(self, op: Callable[..., Any], *args, then: Optional[Callable[[], None]] = None) -> None:
        def _done(_result: Any, error: Optional[BaseException]) -> None:
            if isinstance(error, BackendWriteError):
                log.error("%s", error)
                self.writeFailed.emit(str(error))
            elif error is not None:
                log.error("Write failed unexpectedly", exc_info=error)
                self.writeFailed.emit(f"Write failed: {error}")
            elif then is not None:
                then()
            self._refresh()

        self._store.runner.submit(op, *args, on_done=_done)

    def _refresh(self) -> None:
        self._store.fetch_all()
