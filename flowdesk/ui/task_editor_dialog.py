# flowdesk/ui/task_editor_dialog.py
# Rev 1.0.0
from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple

from PySide6.QtCore import Qt, QDate
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit, QTextEdit,
    QDialogButtonBox, QComboBox, QLabel, QWidget, QDateEdit, QCheckBox, QCompleter
)

from flowdesk.models.types import PRIORITIES, RECURRENCE, STATUSES, UNKNOWN_DEPT
from flowdesk.services.forms import TaskForm
from flowdesk.ui.window_mode import lock_dialog_fixed


class TaskEditorDialog(QDialog):
    """
    Create/edit a task from a TaskForm.

    OK runs ``on_save(form)``; the dialog only closes when it returns True,
    so a blank title leaves it open with a hint. Write failures surface in
    the main window status bar once the background call returns.
    """

    def __init__(
        self,
        form: TaskForm,
        *,
        dept_options: List[Tuple[Any, str]],
        members: List[str],
        on_save: Callable[[TaskForm], bool],
        editing: bool = False,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Edit Task" if editing else "New Task")
        self._on_save = on_save

        self._title = QLineEdit(form.title)
        self._title.setPlaceholderText("What needs to be done?")

        self._desc = QTextEdit()
        self._desc.setAcceptRichText(False)
        self._desc.setPlainText(form.description)
        self._desc.setPlaceholderText("Add details...")

        self._cmb_dept = QComboBox()
        self._cmb_dept.addItem("— None —", "")
        for value, label in dept_options:
            self._cmb_dept.addItem(label, value)
        ix = self._cmb_dept.findData(form.dept_id)
        if ix < 0 and form.dept_id:
            # department was deleted; keep the stored id unless the user picks another
            self._cmb_dept.addItem(UNKNOWN_DEPT, form.dept_id)
            ix = self._cmb_dept.count() - 1
        self._cmb_dept.setCurrentIndex(max(ix, 0))

        self._cmb_status = _combo(STATUSES, form.status)
        self._cmb_priority = _combo(PRIORITIES, form.priority)
        self._cmb_recurrence = _combo(RECURRENCE, form.recurrence)

        self._assignee = QLineEdit(form.assignee)
        self._assignee.setPlaceholderText("Name")
        if members:
            self._assignee.setCompleter(QCompleter(members, self))

        # QDateEdit has no empty state; the checkbox carries "no due date"
        self._has_due = QCheckBox("Set")
        self._due = QDateEdit()
        self._due.setCalendarPopup(True)
        self._due.setDisplayFormat("yyyy-MM-dd")
        due = QDate.fromString(form.due_date, "yyyy-MM-dd") if form.due_date else QDate()
        self._has_due.setChecked(due.isValid())
        self._due.setDate(due if due.isValid() else QDate.currentDate())
        self._due.setEnabled(due.isValid())
        self._has_due.toggled.connect(self._due.setEnabled)
        due_row = QHBoxLayout()
        due_row.addWidget(self._has_due)
        due_row.addWidget(self._due, 1)

        self._tags = QLineEdit(form.tags)
        self._tags.setPlaceholderText("design, urgent, review")

        self._error = QLabel("")
        self._error.setStyleSheet("color: #f43f5e;")

        form_lay = QFormLayout()
        form_lay.addRow("Title *", self._title)
        form_lay.addRow("Description", self._desc)
        form_lay.addRow("Department", self._cmb_dept)
        form_lay.addRow(QLabel("<hr/>"))
        form_lay.addRow("Status", self._cmb_status)
        form_lay.addRow("Priority", self._cmb_priority)
        form_lay.addRow("Assignee", self._assignee)
        form_lay.addRow("Due Date", due_row)
        form_lay.addRow("Recurrence", self._cmb_recurrence)
        form_lay.addRow("Tags (comma separated)", self._tags)

        btns = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        btns.accepted.connect(self._on_accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form_lay)
        root.addWidget(self._error)
        root.addWidget(btns)

        lock_dialog_fixed(self, width_ratio=0.4, height_ratio=0.7)
        self._title.setFocus(Qt.OtherFocusReason)

    def values(self) -> TaskForm:
        return TaskForm(
            title=self._title.text(),
            description=self._desc.toPlainText(),
            dept_id=self._cmb_dept.currentData(),
            status=self._cmb_status.currentText(),
            priority=self._cmb_priority.currentText(),
            assignee=self._assignee.text(),
            due_date=self._due.date().toString("yyyy-MM-dd") if self._has_due.isChecked() else "",
            recurrence=self._cmb_recurrence.currentText(),
            tags=self._tags.text(),
        )

    def _on_accept(self) -> None:
        form = self.values()
        if not form.title.strip():
            self._error.setText("Title is required.")
            self._title.setFocus(Qt.OtherFocusReason)
            return
        if self._on_save(form):
            self.accept()
        else:
            self._error.setText("Could not save the task.")


def _combo(items: List[str], current: Optional[str]) -> QComboBox:
    cmb = QComboBox()
    cmb.addItems(items)
    if current in items:
        cmb.setCurrentText(current)
    return cmb
