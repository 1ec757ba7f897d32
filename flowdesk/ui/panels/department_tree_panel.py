# Rev 1.0.0
# DepartmentTreePanel (All Tasks + departments + team)
from __future__ import annotations
from typing import Any, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTreeWidget, QTreeWidgetItem, QLabel,
    QPushButton, QMenu
)

from flowdesk.ui.widgets import avatar

_MAX_AVATARS = 8


class DepartmentTreePanel(QWidget):
    """
    Sidebar bound to the DataStore.
    Top-level departments carry their sub-departments as children; only
    top-level rows offer "Add sub-department", which keeps the tree two deep.
    IDs are stored in Qt.UserRole.
    """

    departmentSelected = Signal(object)          # dept id, or None for All Tasks
    newDepartmentRequested = Signal(object)      # parent id or None
    editDepartmentRequested = Signal(object)     # Department
    deleteDepartmentRequested = Signal(object)   # dept id
    manageTeamRequested = Signal()

    def __init__(self, departments_vm, store, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._vm = departments_vm
        self._store = store
        self._selected: Any = None

        self._title = QLabel("⚡ FlowDesk")
        self._title.setStyleSheet("font-weight: 700; font-size: 16px;")

        self._btn_all = QPushButton("All Tasks")
        self._btn_all.setCheckable(True)
        self._btn_all.setChecked(True)
        self._btn_all.clicked.connect(lambda: self._select(None))

        self._btn_new = QPushButton("+")
        self._btn_new.setToolTip("Add department")
        self._btn_new.setFixedWidth(28)
        self._btn_new.clicked.connect(lambda: self.newDepartmentRequested.emit(None))

        dept_head = QHBoxLayout()
        dept_head.addWidget(QLabel("DEPARTMENTS"))
        dept_head.addStretch(1)
        dept_head.addWidget(self._btn_new)

        self._loading = QLabel("Loading...")
        self._loading.setStyleSheet("color: #475569;")
        self._loading.hide()

        self._tree = QTreeWidget(self)
        self._tree.setHeaderHidden(True)
        self._tree.setContextMenuPolicy(Qt.CustomContextMenu)
        self._tree.customContextMenuRequested.connect(self._on_context_menu)
        self._tree.itemClicked.connect(self._on_item_clicked)

        self._team = QHBoxLayout()
        self._team.setSpacing(2)
        self._btn_team = QPushButton("Manage Team")
        self._btn_team.clicked.connect(self.manageTeamRequested.emit)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(6, 6, 6, 6)
        lay.addWidget(self._title)
        lay.addWidget(self._btn_all)
        lay.addLayout(dept_head)
        lay.addWidget(self._loading)
        lay.addWidget(self._tree, 1)
        lay.addWidget(QLabel("TEAM"))
        lay.addLayout(self._team)
        lay.addWidget(self._btn_team)

        self._store.loadingChanged.connect(self._loading.setVisible)

    # ------------------- public API -------------------

    def render(self, selected_dept_id: Any = None) -> None:
        self._selected = selected_dept_id
        self._btn_all.setText(f"All Tasks  ({len(self._store.tasks)})")
        self._btn_all.setChecked(selected_dept_id is None)

        self._tree.clear()
        for dept in self._vm.top_level():
            item = self._make_item(dept, top=True)
            self._tree.addTopLevelItem(item)
            for sub in self._vm.children(dept.id):
                item.addChild(self._make_item(sub, top=False))
            item.setExpanded(True)

        self._render_team()

    # ------------------- internals -------------------

    def _make_item(self, dept, *, top: bool) -> QTreeWidgetItem:
        label = f"{dept.icon}  {dept.name}" if top else dept.name
        item = QTreeWidgetItem([f"{label}  ({self._vm.task_count(dept.id)})"])
        item.setData(0, Qt.UserRole, {"dept": dept, "top": top})
        item.setForeground(0, Qt.white if dept.id == self._selected else Qt.gray)
        if dept.id == self._selected:
            item.setSelected(True)
        return item

    def _render_team(self) -> None:
        while (it := self._team.takeAt(0)):
            w = it.widget()
            if w:
                w.deleteLater()
        for m in self._store.members[:_MAX_AVATARS]:
            self._team.addWidget(avatar(m.name, 26))
        self._team.addStretch(1)

    def _select(self, dept_id: Any) -> None:
        self._btn_all.setChecked(dept_id is None)
        self.departmentSelected.emit(dept_id)

    def _on_item_clicked(self, item: QTreeWidgetItem) -> None:
        data = item.data(0, Qt.UserRole)
        if isinstance(data, dict):
            self._select(data["dept"].id)

    def _on_context_menu(self, pos) -> None:
        item = self._tree.itemAt(pos)
        if item is None:
            return
        data = item.data(0, Qt.UserRole)
        if not isinstance(data, dict):
            return
        dept = data["dept"]
        menu = QMenu(self)
        if data["top"]:
            menu.addAction("Add sub-department", lambda: self.newDepartmentRequested.emit(dept.id))
        menu.addAction("Edit", lambda: self.editDepartmentRequested.emit(dept))
        menu.addAction("Delete", lambda: self.deleteDepartmentRequested.emit(dept.id))
        menu.exec(self._tree.viewport().mapToGlobal(pos))
