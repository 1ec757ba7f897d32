# Rev 1.0.0

# flowdesk/ui/members_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton, QListWidget,
    QListWidgetItem, QDialogButtonBox, QLabel
)
from PySide6.QtCore import Qt


class MembersDialog(QDialog):
    """Team list with add/remove; stays in sync with the store while open."""

    def __init__(self, members_vm, store, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Team Members")
        self._vm = members_vm
        self._store = store

        self.name = QLineEdit(self)
        self.name.setPlaceholderText("Full name...")
        self.name.returnPressed.connect(self._on_add)
        btn_add = QPushButton("Add", self)
        btn_add.clicked.connect(self._on_add)

        self.list = QListWidget(self)
        self.btn_remove = QPushButton("Remove", self)
        self.btn_remove.clicked.connect(self._on_remove)

        btns = QDialogButtonBox(QDialogButtonBox.Close, self)
        btns.rejected.connect(self.reject)

        row = QHBoxLayout()
        row.addWidget(self.name, 1)
        row.addWidget(btn_add)

        lay = QVBoxLayout(self)
        lay.addLayout(row)
        lay.addWidget(QLabel("Members"))
        lay.addWidget(self.list, 1)
        lay.addWidget(self.btn_remove)
        lay.addWidget(btns)

        self._store.changed.connect(self._render)
        self._render()

    def _render(self):
        self.list.clear()
        for m in self._vm.list_members():
            item = QListWidgetItem(m.name)
            item.setData(Qt.UserRole, m.id)
            self.list.addItem(item)
        self.btn_remove.setEnabled(self.list.count() > 0)

    def _on_add(self):
        if self._vm.add_member(self.name.text()):
            self.name.clear()

    def _on_remove(self):
        item = self.list.currentItem()
        if item is not None:
            self._vm.delete_member(item.data(Qt.UserRole))

    def done(self, result):
        self._store.changed.disconnect(self._render)
        super().done(result)
