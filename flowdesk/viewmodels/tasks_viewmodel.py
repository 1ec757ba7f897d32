# Rev 1.0.0
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from PySide6.QtCore import QObject, Signal

from flowdesk.errors import ValidationError
from flowdesk.models.entities import Subtask, Task
from flowdesk.models.types import COMMENT_AUTHOR
from flowdesk.services.forms import TaskForm
from flowdesk.viewmodels.base_viewmodel import CrudViewModel

log = logging.getLogger(__name__)


class TasksViewModel(CrudViewModel):
    """
    Task, subtask and comment commands plus the open detail panel.

    The detail panel holds a detached copy of one task. Status changes and
    subtask edits patch that copy right away; the next successful fetch
    replaces it with the stored task.

    Emits:
      - detailChanged(task | None)
      - writeFailed(message)

    Command methods return False only when nothing was sent (blank input);
    the write itself completes later on the GUI thread.
    """

    detailChanged = Signal(object)

    def __init__(self, store, backend, dashboard, parent: Optional[QObject] = None):
        super().__init__(store, backend, parent)
        self._dashboard = dashboard
        self._editing_id: Any = None
        self._detail: Optional[Task] = None
        self._store.changed.connect(self._on_store_changed)

    # ---- editor ----
    @property
    def editing_id(self) -> Any:
        return self._editing_id

    def open_new(self) -> TaskForm:
        self._editing_id = None
        return TaskForm.blank(self._store.departments, self._dashboard.selected_dept_id)

    def open_edit(self, task: Task) -> TaskForm:
        self._editing_id = task.id
        return TaskForm.from_task(task)

    def save(self, form: TaskForm) -> bool:
        """Insert or update; False (invalid form) keeps the editor open."""
        try:
            payload = form.to_payload()
        except ValidationError as exc:
            log.debug("Task not saved: %s", exc)
            return False
        if self._editing_id is not None:
            self._write(self._backend.update, "tasks", self._editing_id, payload)
        else:
            self._write(self._backend.insert, "tasks", payload)
        self._editing_id = None
        return True

    def delete_task(self, task_id: Any) -> bool:
        def _close_if_open() -> None:
            if self._detail is not None and self._detail.id == task_id:
                self.close_detail()

        self._write(self._backend.delete, "tasks", task_id, then=_close_if_open)
        return True

    def update_status(self, task_id: Any, status: str) -> bool:
        if self._detail is not None and self._detail.id == task_id:
            self._detail.status = status
            self.detailChanged.emit(self._detail)
        self._write(self._backend.update, "tasks", task_id, {"status": status})
        return True

    # ---- detail panel ----
    @property
    def detail(self) -> Optional[Task]:
        return self._detail

    def open_detail(self, task: Task) -> None:
        self._detail = task.copy()
        self.detailChanged.emit(self._detail)

    def close_detail(self) -> None:
        if self._detail is not None:
            self._detail = None
            self.detailChanged.emit(None)

    def _on_store_changed(self) -> None:
        if self._detail is None:
            return
        fresh = self._store.task(self._detail.id)
        if fresh is None:
            # deleted elsewhere
            self.close_detail()
            return
        self._detail = fresh.copy()
        self.detailChanged.emit(self._detail)

    # ---- subtasks ----
    def add_subtask(self, task_id: Any, title: str) -> bool:
        if not (title or "").strip():
            return False

        def _show_placeholder() -> None:
            if self._detail is not None and self._detail.id == task_id:
                tmp = Subtask(id=f"tmp{int(time.time() * 1000)}", task_id=task_id, title=title)
                self._detail.subtasks.append(tmp)
                self.detailChanged.emit(self._detail)

        self._write(self._backend.insert, "subtasks", {"task_id": task_id, "title": title},
                    then=_show_placeholder)
        return True

    def toggle_subtask(self, subtask_id: Any, done: bool) -> bool:
        if self._detail is not None:
            for s in self._detail.subtasks:
                if s.id == subtask_id:
                    s.done = not s.done
                    self.detailChanged.emit(self._detail)
                    break
        self._write(self._backend.update, "subtasks", subtask_id, {"done": not done})
        return True

    # ---- comments ----
    def add_comment(self, task_id: Any, text: str) -> bool:
        if not (text or "").strip():
            return False
        payload = {"task_id": task_id, "text": text, "author": COMMENT_AUTHOR}
        self._write(self._backend.insert, "comments", payload)
        return True
