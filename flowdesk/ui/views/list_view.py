# Rev 1.0.0
# List view: one row per task, inline status combo
from __future__ import annotations
from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem,
    QHeaderView, QComboBox, QPushButton, QStackedLayout
)

from flowdesk.models.entities import Task
from flowdesk.models.types import OVERDUE_COLOR, PRIORITY_COLORS, STATUSES, STATUS_COLORS
from flowdesk.services import derived
from flowdesk.ui.widgets import badge, hint

_COLUMNS = ["Task", "Department", "Status", "Priority", "Assignee", "Due Date", ""]


class ListView(QWidget):
    taskClicked = Signal(object)             # Task
    editRequested = Signal(object)           # Task
    deleteRequested = Signal(object)         # task id
    statusChangeRequested = Signal(object, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tasks: List[Task] = []

        self._table = QTableWidget(0, len(_COLUMNS))
        self._table.setHorizontalHeaderLabels(_COLUMNS)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.cellClicked.connect(self._on_cell_clicked)

        hdr = self._table.horizontalHeader()
        hdr.setSectionResizeMode(0, QHeaderView.Stretch)            # Task
        for col in range(1, len(_COLUMNS)):
            hdr.setSectionResizeMode(col, QHeaderView.ResizeToContents)

        vh = self._table.verticalHeader()
        vh.setVisible(False)
        vh.setDefaultSectionSize(34)
        self._table.setWordWrap(False)
        self._table.setAlternatingRowColors(True)

        self._empty = hint("No tasks found. Create one to get started!")

        self._stack = QStackedLayout()
        self._stack.addWidget(self._table)
        self._stack.addWidget(self._empty)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addLayout(self._stack)

    # ---------- Public API ----------
    def set_tasks(self, tasks: List[Task], dashboard) -> None:
        self._tasks = list(tasks)
        self._table.setRowCount(len(self._tasks))
        for r, t in enumerate(self._tasks):
            self._render_row(r, t, dashboard)
        self._stack.setCurrentWidget(self._table if self._tasks else self._empty)

    # ---------- Internals ----------
    def _render_row(self, r: int, t: Task, dashboard) -> None:
        extras = []
        if t.recurrence != "None":
            extras.append(f"🔄 {t.recurrence}")
        done, total = derived.subtask_counts(t)
        if total:
            extras.append(f"✓ {done}/{total}")
        extras.extend(f"#{tag}" for tag in t.tags[:2])
        title = t.title + (f"    {'  '.join(extras)}" if extras else "")

        title_item = QTableWidgetItem(title)
        title_item.setData(Qt.UserRole, t.id)
        if t.description:
            title_item.setToolTip(t.description)
        self._table.setItem(r, 0, title_item)

        dept_item = QTableWidgetItem(dashboard.dept_name(t.dept_id))
        dept_item.setData(Qt.DecorationRole, QColor(dashboard.dept_color(t.dept_id)))
        self._table.setItem(r, 1, dept_item)

        status = QComboBox()
        status.addItems(STATUSES)
        status.setCurrentText(t.status)
        status.setStyleSheet(f"QComboBox {{ color: {STATUS_COLORS.get(t.status, '#64748b')}; font-weight: 600; }}")
        status.currentTextChanged.connect(lambda s, tid=t.id: self.statusChangeRequested.emit(tid, s))
        self._table.setCellWidget(r, 2, status)

        self._table.setCellWidget(r, 3, badge(t.priority, PRIORITY_COLORS.get(t.priority, "#475569"), small=True))

        assignee = (t.assignee or "").split(" ")[0] if t.assignee else "—"
        self._table.setItem(r, 4, QTableWidgetItem(assignee))

        due_item = QTableWidgetItem(t.due_date.isoformat() if t.due_date else "—")
        if derived.is_overdue(t):
            due_item.setForeground(QColor(OVERDUE_COLOR))
        self._table.setItem(r, 5, due_item)

        actions = QWidget()
        lay = QHBoxLayout(actions)
        lay.setContentsMargins(2, 0, 2, 0)
        btn_edit = QPushButton("Edit")
        btn_del = QPushButton("Delete")
        btn_edit.clicked.connect(lambda _=False, task=t: self.editRequested.emit(task))
        btn_del.clicked.connect(lambda _=False, tid=t.id: self.deleteRequested.emit(tid))
        lay.addWidget(btn_edit)
        lay.addWidget(btn_del)
        self._table.setCellWidget(r, 6, actions)

    def _on_cell_clicked(self, row: int, col: int) -> None:
        if 0 <= row < len(self._tasks) and col in (0, 1, 4, 5):
            self.taskClicked.emit(self._tasks[row])
