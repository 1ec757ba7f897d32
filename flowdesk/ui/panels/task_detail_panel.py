# Rev 1.0.0
# Task detail side panel: Details / Subtasks / Comments
from __future__ import annotations
from datetime import datetime
from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTabWidget,
    QFormLayout, QLineEdit, QCheckBox, QScrollArea, QFrame
)

from flowdesk.models.entities import Task
from flowdesk.models.types import OVERDUE_COLOR, PRIORITY_COLORS, STATUSES, STATUS_COLORS
from flowdesk.services import derived
from flowdesk.ui.widgets import avatar, badge, hint

_TEXT = "#94a3b8"


def _fmt_date(ts: Optional[str]) -> str:
    if not ts:
        return ""
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).strftime("%b %d %Y")
    except ValueError:
        return ts[:10]


class TaskDetailPanel(QWidget):
    closeRequested = Signal()
    editRequested = Signal(object)          # Task
    deleteRequested = Signal(object)        # task id
    statusChangeRequested = Signal(object, str)
    addSubtaskRequested = Signal(object, str)
    toggleSubtaskRequested = Signal(object, bool)
    addCommentRequested = Signal(object, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._task: Optional[Task] = None

        # ---- header ----
        self._dept = QLabel("")
        self._title = QLabel("")
        self._title.setWordWrap(True)
        self._title.setStyleSheet("font-size: 16px; font-weight: 700;")

        btn_edit = QPushButton("Edit")
        btn_delete = QPushButton("Delete")
        btn_close = QPushButton("×")
        btn_close.setFixedWidth(28)
        btn_edit.clicked.connect(self._on_edit)
        btn_delete.clicked.connect(self._on_delete)
        btn_close.clicked.connect(self.closeRequested.emit)

        head = QHBoxLayout()
        head.addWidget(self._dept, 1)
        head.addWidget(btn_edit)
        head.addWidget(btn_delete)
        head.addWidget(btn_close)

        self._status_row = QHBoxLayout()
        self._status_buttons: dict[str, QPushButton] = {}
        for s in STATUSES:
            b = QPushButton(s)
            b.setCheckable(True)
            b.clicked.connect(lambda _=False, status=s: self._on_status(status))
            self._status_buttons[s] = b
            self._status_row.addWidget(b)

        # ---- tabs ----
        self._tabs = QTabWidget(self)
        self._details = QWidget()
        self._details_lay = QVBoxLayout(self._details)

        self._subtasks = QWidget()
        sub_lay = QVBoxLayout(self._subtasks)
        self._sub_input = QLineEdit()
        self._sub_input.setPlaceholderText("Add subtask...")
        self._sub_input.returnPressed.connect(self._on_add_subtask)
        btn_add_sub = QPushButton("Add")
        btn_add_sub.clicked.connect(self._on_add_subtask)
        sub_in = QHBoxLayout()
        sub_in.addWidget(self._sub_input, 1)
        sub_in.addWidget(btn_add_sub)
        sub_lay.addLayout(sub_in)
        self._sub_list = QVBoxLayout()
        sub_lay.addLayout(self._sub_list)
        self._sub_progress = QLabel("")
        self._sub_progress.setStyleSheet(f"color: {_TEXT};")
        sub_lay.addWidget(self._sub_progress)
        sub_lay.addStretch(1)

        self._comments = QWidget()
        com_lay = QVBoxLayout(self._comments)
        self._com_list = QVBoxLayout()
        com_body = QWidget()
        com_body.setLayout(self._com_list)
        com_scroll = QScrollArea()
        com_scroll.setWidgetResizable(True)
        com_scroll.setFrameShape(QFrame.NoFrame)
        com_scroll.setWidget(com_body)
        com_lay.addWidget(com_scroll, 1)
        self._com_input = QLineEdit()
        self._com_input.setPlaceholderText("Write a comment...")
        self._com_input.returnPressed.connect(self._on_add_comment)
        btn_send = QPushButton("Send")
        btn_send.clicked.connect(self._on_add_comment)
        com_in = QHBoxLayout()
        com_in.addWidget(self._com_input, 1)
        com_in.addWidget(btn_send)
        com_lay.addLayout(com_in)

        self._tabs.addTab(self._details, "Details")
        self._tabs.addTab(self._subtasks, "Subtasks")
        self._tabs.addTab(self._comments, "Comments")

        root = QVBoxLayout(self)
        root.addLayout(head)
        root.addWidget(self._title)
        root.addLayout(self._status_row)
        root.addWidget(self._tabs, 1)

    # ---- Public API ----
    @property
    def task_id(self):
        return self._task.id if self._task else None

    def set_task(self, task: Optional[Task], dashboard) -> None:
        self._task = task
        if task is None:
            return
        self._dept.setText(dashboard.dept_name(task.dept_id))
        self._dept.setStyleSheet(f"color: {dashboard.dept_color(task.dept_id)}; font-weight: 600;")
        self._title.setText(task.title)
        for s, b in self._status_buttons.items():
            b.setChecked(s == task.status)
            b.setStyleSheet(f"QPushButton {{ color: {STATUS_COLORS[s]}; font-weight: {700 if s == task.status else 500}; }}")

        self._render_details(task)
        self._render_subtasks(task)
        self._render_comments(task)

        n_sub, n_com = len(task.subtasks), len(task.comments)
        self._tabs.setTabText(1, f"Subtasks ({n_sub})" if n_sub else "Subtasks")
        self._tabs.setTabText(2, f"Comments ({n_com})" if n_com else "Comments")

    # ---- Internals ----
    def _render_details(self, t: Task) -> None:
        _clear(self._details_lay)
        if t.description:
            desc = QLabel(t.description)
            desc.setWordWrap(True)
            desc.setStyleSheet(f"color: {_TEXT}; padding: 12px; background: #12141f; border-radius: 8px;")
            self._details_lay.addWidget(desc)

        form_host = QWidget()
        form = QFormLayout(form_host)
        form.addRow("Priority", badge(t.priority, PRIORITY_COLORS.get(t.priority, "#475569")))
        form.addRow("Status", badge(t.status, STATUS_COLORS.get(t.status, "#64748b")))

        if t.assignee:
            who = QWidget()
            who_lay = QHBoxLayout(who)
            who_lay.setContentsMargins(0, 0, 0, 0)
            who_lay.addWidget(avatar(t.assignee, 22))
            who_lay.addWidget(QLabel(t.assignee))
            who_lay.addStretch(1)
            form.addRow("Assignee", who)
        else:
            form.addRow("Assignee", QLabel("Unassigned"))

        due = QLabel(t.due_date.isoformat() if t.due_date else "Not set")
        due.setStyleSheet(f"color: {OVERDUE_COLOR if derived.is_overdue(t) else _TEXT};")
        form.addRow("Due Date", due)
        form.addRow("Recurrence", QLabel("—" if t.recurrence == "None" else t.recurrence))
        self._details_lay.addWidget(form_host)

        if t.tags:
            self._details_lay.addWidget(QLabel("Tags"))
            self._details_lay.addWidget(QLabel("  ".join(f"#{tag}" for tag in t.tags)))
        self._details_lay.addStretch(1)

    def _render_subtasks(self, t: Task) -> None:
        _clear(self._sub_list)
        if not t.subtasks:
            self._sub_list.addWidget(hint("No subtasks yet"))
            self._sub_progress.setText("")
            return
        for s in t.subtasks:
            cb = QCheckBox(s.title)
            cb.setChecked(s.done)
            if s.done:
                cb.setStyleSheet("QCheckBox { color: #475569; text-decoration: line-through; }")
            cb.clicked.connect(lambda _=False, sid=s.id, done=s.done: self.toggleSubtaskRequested.emit(sid, done))
            self._sub_list.addWidget(cb)
        done, total = derived.subtask_counts(t)
        self._sub_progress.setText(f"{done}/{total} completed")

    def _render_comments(self, t: Task) -> None:
        _clear(self._com_list)
        if not t.comments:
            self._com_list.addWidget(hint("No comments yet"))
            self._com_list.addStretch(1)
            return
        for c in t.comments:
            box = QFrame()
            box.setFrameShape(QFrame.StyledPanel)
            lay = QVBoxLayout(box)
            top = QHBoxLayout()
            top.addWidget(avatar(c.author, 20))
            author = QLabel(c.author)
            author.setStyleSheet("font-weight: 600;")
            top.addWidget(author)
            top.addStretch(1)
            when = QLabel(_fmt_date(c.created_at))
            when.setStyleSheet("color: #475569; font-size: 10px;")
            top.addWidget(when)
            lay.addLayout(top)
            text = QLabel(c.text)
            text.setWordWrap(True)
            text.setStyleSheet(f"color: {_TEXT};")
            lay.addWidget(text)
            self._com_list.addWidget(box)
        self._com_list.addStretch(1)

    def _on_edit(self) -> None:
        if self._task is not None:
            self.editRequested.emit(self._task)

    def _on_delete(self) -> None:
        if self._task is not None:
            self.deleteRequested.emit(self._task.id)

    def _on_status(self, status: str) -> None:
        if self._task is not None:
            self.statusChangeRequested.emit(self._task.id, status)

    def _on_add_subtask(self) -> None:
        text = self._sub_input.text()
        if self._task is not None and text.strip():
            self.addSubtaskRequested.emit(self._task.id, text)
        self._sub_input.clear()

    def _on_add_comment(self) -> None:
        text = self._com_input.text()
        if self._task is not None and text.strip():
            self.addCommentRequested.emit(self._task.id, text)
        self._com_input.clear()


def _clear(layout) -> None:
    while (item := layout.takeAt(0)):
        w = item.widget()
        if w:
            w.deleteLater()
