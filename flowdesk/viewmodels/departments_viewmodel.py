# Rev 1.0.0
from __future__ import annotations

import logging
from typing import Any, List, Optional

from PySide6.QtCore import QObject

from flowdesk.errors import ValidationError
from flowdesk.models.entities import Department
from flowdesk.services import derived
from flowdesk.services.forms import DepartmentForm
from flowdesk.viewmodels.base_viewmodel import CrudViewModel

log = logging.getLogger(__name__)


class DepartmentsViewModel(CrudViewModel):
    """Department tree commands. Depth is capped at two by only offering
    "add sub-department" on top-level rows."""

    def __init__(self, store, backend, dashboard, parent: Optional[QObject] = None):
        super().__init__(store, backend, parent)
        self._dashboard = dashboard
        self._editing_id: Any = None

    # ---- queries ----
    def top_level(self) -> List[Department]:
        return derived.top_departments(self._store.departments)

    def children(self, parent_id: Any) -> List[Department]:
        return derived.sub_departments(self._store.departments, parent_id)

    def task_count(self, dept_id: Any) -> int:
        return sum(1 for t in self._store.tasks if t.dept_id == dept_id)

    # ---- editor ----
    @property
    def editing_id(self) -> Any:
        return self._editing_id

    def open_new(self, parent_id: Any = None) -> DepartmentForm:
        self._editing_id = None
        return DepartmentForm.blank(self._store.departments, parent_id)

    def open_edit(self, dept: Department) -> DepartmentForm:
        self._editing_id = dept.id
        return DepartmentForm.from_department(dept)

    def save(self, form: DepartmentForm) -> bool:
        try:
            payload = form.to_payload()
        except ValidationError as exc:
            log.debug("Department not saved: %s", exc)
            return False
        if self._editing_id is not None:
            self._write(self._backend.update, "departments", self._editing_id, payload)
        else:
            self._write(self._backend.insert, "departments", payload)
        self._editing_id = None
        return True

    def delete(self, dept_id: Any) -> bool:
        # tasks keep their dept_id and render as "Unknown"
        def _reset_filter() -> None:
            if self._dashboard.selected_dept_id == dept_id:
                self._dashboard.select_department(None)

        self._write(self._backend.delete, "departments", dept_id, then=_reset_filter)
        return True
