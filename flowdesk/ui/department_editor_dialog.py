# Rev 1.0.0
# Department editor with palette picker
from __future__ import annotations
from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit, QDialogButtonBox,
    QLabel, QPushButton, QButtonGroup, QWidget
)

from flowdesk.models.types import COLORS, DEFAULT_ICON
from flowdesk.services.forms import DepartmentForm


class DepartmentEditorDialog(QDialog):
    """
    Name + color for every department; icon only for top-level ones.
    ``parent_id`` is fixed by whoever opened the dialog.
    """

    def __init__(self, form: DepartmentForm, *, on_save: Callable[[DepartmentForm], bool],
                 editing: bool = False, parent_name: str = "", parent: QWidget | None = None):
        super().__init__(parent)
        self._form = form
        self._on_save = on_save
        kind = "Sub-department" if form.is_sub_department else "Department"
        self.setWindowTitle(f"{'Edit' if editing else 'New'} {kind}")

        self._name = QLineEdit(form.name)
        self._name.setPlaceholderText("e.g. Engineering")

        self._icon = QLineEdit(form.icon or DEFAULT_ICON)
        self._icon.setMaxLength(4)

        self._colors = QButtonGroup(self)
        self._colors.setExclusive(True)
        swatches = QHBoxLayout()
        for i, c in enumerate(COLORS):
            b = QPushButton()
            b.setCheckable(True)
            b.setFixedSize(26, 26)
            b.setStyleSheet(
                f"QPushButton {{ background-color: {c}; border-radius: 13px; border: 2px solid transparent; }}"
                "QPushButton:checked { border: 2px solid #ffffff; }"
            )
            b.setChecked(c == form.color)
            self._colors.addButton(b, i)
            swatches.addWidget(b)
        swatches.addStretch(1)

        self._error = QLabel("")
        self._error.setStyleSheet("color: #f43f5e;")

        lay = QFormLayout()
        if form.is_sub_department and parent_name:
            lay.addRow("Parent", QLabel(parent_name))
        lay.addRow("Name *", self._name)
        if not form.is_sub_department:
            lay.addRow("Icon (emoji)", self._icon)
        lay.addRow("Color", swatches)

        btns = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        btns.accepted.connect(self._on_accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(lay)
        root.addWidget(self._error)
        root.addWidget(btns)
        self._name.setFocus(Qt.OtherFocusReason)

    def values(self) -> DepartmentForm:
        idx = self._colors.checkedId()
        return DepartmentForm(
            name=self._name.text(),
            color=COLORS[idx] if idx >= 0 else self._form.color,
            icon=self._icon.text() or DEFAULT_ICON,
            parent_id=self._form.parent_id,
        )

    def _on_accept(self) -> None:
        form = self.values()
        if not form.name.strip():
            self._error.setText("Name is required.")
            return
        if self._on_save(form):
            self.accept()
        else:
            self._error.setText("Could not save the department.")
