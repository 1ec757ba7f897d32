# Rev 1.0.0
from __future__ import annotations

from typing import Any, List, Optional

from PySide6.QtCore import QObject, Signal

from flowdesk.models.entities import Task
from flowdesk.models.types import ALL, ViewMode
from flowdesk.services import derived


class DashboardViewModel(QObject):
    """
    Scope + filters + view mode over the DataStore.
    Emits:
      - filtersChanged()            scope/search/status/priority changed
      - viewModeChanged(ViewMode)
    """

    filtersChanged = Signal()
    viewModeChanged = Signal(object)

    def __init__(self, store, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._dept_id: Any = None
        self._search = ""
        self._status = ALL
        self._priority = ALL
        self._view_mode = ViewMode.LIST

    # ---- filters ----
    @property
    def selected_dept_id(self) -> Any:
        return self._dept_id

    @property
    def search(self) -> str:
        return self._search

    @property
    def status_filter(self) -> str:
        return self._status

    @property
    def priority_filter(self) -> str:
        return self._priority

    def select_department(self, dept_id: Any) -> None:
        dept_id = dept_id or None
        if dept_id != self._dept_id:
            self._dept_id = dept_id
            self.filtersChanged.emit()

    def set_search(self, text: str) -> None:
        text = text or ""
        if text != self._search:
            self._search = text
            self.filtersChanged.emit()

    def set_status_filter(self, status: str) -> None:
        status = status or ALL
        if status != self._status:
            self._status = status
            self.filtersChanged.emit()

    def set_priority_filter(self, priority: str) -> None:
        priority = priority or ALL
        if priority != self._priority:
            self._priority = priority
            self.filtersChanged.emit()

    # ---- view mode ----
    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    def set_view_mode(self, mode: ViewMode) -> None:
        if mode is not self._view_mode:
            self._view_mode = mode
            self.viewModeChanged.emit(mode)

    # ---- derived ----
    def filtered_tasks(self) -> List[Task]:
        return derived.filter_tasks(
            self._store.tasks,
            dept_id=self._dept_id,
            search=self._search,
            status=self._status,
            priority=self._priority,
        )

    def scoped_tasks(self) -> List[Task]:
        return derived.scoped_tasks(self._store.tasks, self._dept_id)

    def progress(self) -> int:
        return derived.progress(self.scoped_tasks())

    def completed_count(self) -> int:
        return derived.completed_count(self.scoped_tasks())

    def scope_title(self) -> str:
        if not self._dept_id:
            return "All Tasks"
        return derived.dept_display_name(self._store.departments, self._dept_id)

    def dept_name(self, dept_id: Any) -> str:
        return derived.dept_display_name(self._store.departments, dept_id)

    def dept_color(self, dept_id: Any) -> str:
        return derived.dept_color(self._store.departments, dept_id)
