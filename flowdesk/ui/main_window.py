# Rev 1.0.0
# FlowDesk main window
# Sidebar | header + view switcher + filters | List/Board/Timeline | detail dock

from __future__ import annotations
import logging
from typing import Any, Dict

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QLineEdit, QComboBox, QStackedWidget, QDockWidget, QProgressBar,
    QMessageBox, QButtonGroup, QSplitter
)

from flowdesk.app_context import AppContext
from flowdesk.models.types import ALL, PRIORITIES, STATUSES, ViewMode
from flowdesk.services import derived
from flowdesk.ui.department_editor_dialog import DepartmentEditorDialog
from flowdesk.ui.diagnostics_dock import DiagnosticsDock
from flowdesk.ui.members_dialog import MembersDialog
from flowdesk.ui.panels.department_tree_panel import DepartmentTreePanel
from flowdesk.ui.panels.task_detail_panel import TaskDetailPanel
from flowdesk.ui.task_editor_dialog import TaskEditorDialog
from flowdesk.ui.views.board_view import BoardView
from flowdesk.ui.views.list_view import ListView
from flowdesk.ui.views.timeline_view import TimelineView
from flowdesk.ui.window_mode import restore_size
from flowdesk.utils.config import save_settings

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext, *, settings: Dict[str, Any], parent=None):
        super().__init__(parent)
        self._ctx = ctx
        self._settings = settings
        self._store = ctx.store
        self._dash = ctx.dashboard

        self.setWindowTitle("FlowDesk")
        restore_size(self, settings)

        # ---- sidebar ----
        self._sidebar = DepartmentTreePanel(ctx.departments, self._store, self)
        self._sidebar.setMinimumWidth(220)
        self._sidebar.departmentSelected.connect(self._dash.select_department)
        self._sidebar.newDepartmentRequested.connect(self._new_department)
        self._sidebar.editDepartmentRequested.connect(self._edit_department)
        self._sidebar.deleteDepartmentRequested.connect(self._delete_department)
        self._sidebar.manageTeamRequested.connect(self._open_members)

        # ---- header ----
        self._btn_sidebar = QPushButton("☰")
        self._btn_sidebar.setFixedWidth(32)
        self._btn_sidebar.setCheckable(True)
        self._btn_sidebar.setChecked(settings.get("ui", {}).get("sidebar_open", True))
        self._btn_sidebar.toggled.connect(self._sidebar.setVisible)

        self._lbl_scope = QLabel("All Tasks")
        self._lbl_scope.setStyleSheet("font-size: 18px; font-weight: 700;")
        self._lbl_counts = QLabel("")
        self._lbl_counts.setStyleSheet("color: #64748b;")
        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setFixedWidth(140)
        self._progress.setFormat("%p%")

        self._views_group = QButtonGroup(self)
        self._views_group.setExclusive(True)
        head = QHBoxLayout()
        head.addWidget(self._btn_sidebar)
        titles = QVBoxLayout()
        titles.addWidget(self._lbl_scope)
        titles.addWidget(self._lbl_counts)
        head.addLayout(titles, 1)
        head.addWidget(self._progress)
        for mode in ViewMode:
            b = QPushButton(mode.value)
            b.setCheckable(True)
            b.clicked.connect(lambda _=False, m=mode: self._dash.set_view_mode(m))
            self._views_group.addButton(b)
            head.addWidget(b)
            if mode is ViewMode.LIST:
                b.setChecked(True)
        self._view_buttons = {b.text(): b for b in self._views_group.buttons()}
        btn_new = QPushButton("+ New Task")
        btn_new.clicked.connect(self._new_task)
        head.addWidget(btn_new)

        # ---- filters ----
        self._search = QLineEdit()
        self._search.setPlaceholderText("Search tasks...")
        self._search.setClearButtonEnabled(True)
        self._search.textChanged.connect(self._dash.set_search)
        self._cmb_status = QComboBox()
        self._cmb_status.addItems([ALL, *STATUSES])
        self._cmb_status.currentTextChanged.connect(self._dash.set_status_filter)
        self._cmb_priority = QComboBox()
        self._cmb_priority.addItems([ALL, *PRIORITIES])
        self._cmb_priority.currentTextChanged.connect(self._dash.set_priority_filter)
        self._lbl_loading = QLabel("Syncing...")
        self._lbl_loading.setStyleSheet("color: #475569;")
        self._lbl_loading.hide()
        self._store.loadingChanged.connect(self._lbl_loading.setVisible)

        filters = QHBoxLayout()
        filters.addWidget(self._search, 1)
        filters.addWidget(QLabel("Status"))
        filters.addWidget(self._cmb_status)
        filters.addWidget(QLabel("Priority"))
        filters.addWidget(self._cmb_priority)
        filters.addWidget(self._lbl_loading)

        # ---- views ----
        self._list = ListView()
        self._board = BoardView()
        self._timeline = TimelineView()
        self._views = {
            ViewMode.LIST: self._list,
            ViewMode.BOARD: self._board,
            ViewMode.TIMELINE: self._timeline,
        }
        self._stack = QStackedWidget()
        for view in self._views.values():
            self._stack.addWidget(view)
            view.taskClicked.connect(ctx.tasks.open_detail)
        for view in (self._list, self._board):
            view.statusChangeRequested.connect(ctx.tasks.update_status)
        self._list.editRequested.connect(self._edit_task)
        self._list.deleteRequested.connect(self._delete_task)

        self._error_page = QLabel("")
        self._error_page.setAlignment(Qt.AlignCenter)
        self._error_page.setWordWrap(True)
        self._error_page.setStyleSheet("color: #f43f5e; font-size: 14px;")
        btn_retry = QPushButton("Retry")
        btn_retry.clicked.connect(lambda: self._store.fetch_all())
        err_host = QWidget()
        err_lay = QVBoxLayout(err_host)
        err_lay.addStretch(1)
        err_lay.addWidget(self._error_page)
        err_lay.addWidget(btn_retry, 0, Qt.AlignHCenter)
        err_lay.addStretch(1)
        self._stack.addWidget(err_host)
        self._err_host = err_host

        main = QWidget()
        v = QVBoxLayout(main)
        v.addLayout(head)
        v.addLayout(filters)
        v.addWidget(self._stack, 1)

        split = QSplitter(Qt.Horizontal, self)
        split.addWidget(self._sidebar)
        split.addWidget(main)
        split.setStretchFactor(1, 1)
        self.setCentralWidget(split)
        self._sidebar.setVisible(self._btn_sidebar.isChecked())

        # ---- detail dock ----
        self._detail = TaskDetailPanel(self)
        self._detail_dock = QDockWidget("Task", self)
        self._detail_dock.setObjectName("TaskDetailDock")
        self._detail_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self._detail_dock.setFeatures(QDockWidget.DockWidgetClosable)
        self._detail_dock.setWidget(self._detail)
        self._detail_dock.setMinimumWidth(380)
        self.addDockWidget(Qt.RightDockWidgetArea, self._detail_dock)
        self._detail_dock.hide()
        self._detail_dock.visibilityChanged.connect(self._on_detail_visibility)

        self._detail.closeRequested.connect(ctx.tasks.close_detail)
        self._detail.editRequested.connect(self._edit_task)
        self._detail.deleteRequested.connect(self._delete_task)
        self._detail.statusChangeRequested.connect(ctx.tasks.update_status)
        self._detail.addSubtaskRequested.connect(ctx.tasks.add_subtask)
        self._detail.toggleSubtaskRequested.connect(ctx.tasks.toggle_subtask)
        self._detail.addCommentRequested.connect(ctx.tasks.add_comment)

        # ---- diagnostics dock ----
        self._diag = DiagnosticsDock(self)
        self.addDockWidget(Qt.BottomDockWidgetArea, self._diag)
        self._diag.setVisible(bool(settings.get("ui", {}).get("diagnostics_dock_visible", False)))
        diag_action = self._diag.toggleViewAction()
        diag_action.setShortcut("Ctrl+Shift+D")
        self.addAction(diag_action)

        # ---- wiring ----
        self._store.changed.connect(self._render)
        self._store.errorRaised.connect(self._on_error)
        self._dash.filtersChanged.connect(self._render)
        self._dash.viewModeChanged.connect(self._on_view_mode)
        ctx.tasks.detailChanged.connect(self._on_detail_changed)
        for vm in (ctx.tasks, ctx.departments, ctx.members):
            vm.writeFailed.connect(self._on_write_failed)

        self._dash.set_view_mode(ViewMode.parse(settings.get("ui", {}).get("view_mode")))
        self._on_view_mode(self._dash.view_mode)
        self._render()

    # -------------------- rendering --------------------

    def _render(self) -> None:
        self._sidebar.render(self._dash.selected_dept_id)
        self._lbl_scope.setText(self._dash.scope_title())
        total = len(self._dash.scoped_tasks())
        self._lbl_counts.setText(f"{self._dash.completed_count()}/{total} tasks completed")
        self._progress.setValue(self._dash.progress())

        if self._store.error:
            self._show_error(self._store.error)
            return
        tasks = self._dash.filtered_tasks()
        self._views[self._dash.view_mode].set_tasks(tasks, self._dash)
        self._stack.setCurrentWidget(self._views[self._dash.view_mode])

    def _on_view_mode(self, mode: ViewMode) -> None:
        btn = self._view_buttons.get(mode.value)
        if btn is not None:
            btn.setChecked(True)
        self._render()

    def _on_error(self, message: str) -> None:
        # any failed fetch blocks the views until a fetch succeeds
        self.statusBar().showMessage(message, 8000)
        self._show_error(message)

    def _show_error(self, message: str) -> None:
        self._error_page.setText(message)
        self._stack.setCurrentWidget(self._err_host)

    def _on_write_failed(self, message: str) -> None:
        self.statusBar().showMessage(message, 8000)

    def _on_detail_changed(self, task) -> None:
        if task is None:
            self._detail_dock.hide()
            return
        self._detail.set_task(task, self._dash)
        self._detail_dock.setWindowTitle(task.title)
        self._detail_dock.show()

    def _on_detail_visibility(self, visible: bool) -> None:
        # closing the dock with its own button also drops the detail
        if not visible and self._ctx.tasks.detail is not None and not self.isMinimized():
            self._ctx.tasks.close_detail()

    # -------------------- tasks --------------------

    def _new_task(self) -> None:
        self._open_task_editor(self._ctx.tasks.open_new(), editing=False)

    def _edit_task(self, task) -> None:
        self._open_task_editor(self._ctx.tasks.open_edit(task), editing=True)

    def _open_task_editor(self, form, *, editing: bool) -> None:
        dlg = TaskEditorDialog(
            form,
            dept_options=derived.department_options(self._store.departments),
            members=[m.name for m in self._store.members],
            on_save=self._ctx.tasks.save,
            editing=editing,
            parent=self,
        )
        dlg.exec()

    def _delete_task(self, task_id) -> None:
        if self._confirm("Delete Task", "Delete this task? Its subtasks and comments go with it."):
            self._ctx.tasks.delete_task(task_id)

    # -------------------- departments --------------------

    def _new_department(self, parent_id) -> None:
        form = self._ctx.departments.open_new(parent_id)
        parent_name = self._dash.dept_name(parent_id) if parent_id else ""
        DepartmentEditorDialog(form, on_save=self._ctx.departments.save,
                               parent_name=parent_name, parent=self).exec()

    def _edit_department(self, dept) -> None:
        form = self._ctx.departments.open_edit(dept)
        parent_name = self._dash.dept_name(dept.parent_id) if dept.parent_id else ""
        DepartmentEditorDialog(form, on_save=self._ctx.departments.save, editing=True,
                               parent_name=parent_name, parent=self).exec()

    def _delete_department(self, dept_id) -> None:
        if self._confirm("Delete Department", "Delete this department? Its tasks stay but lose their department."):
            self._ctx.departments.delete(dept_id)

    def _open_members(self) -> None:
        MembersDialog(self._ctx.members, self._store, self).exec()

    # -------------------- utils --------------------

    def _confirm(self, title: str, text: str) -> bool:
        return QMessageBox.question(self, title, text) == QMessageBox.Yes

    def closeEvent(self, ev):
        self._settings.setdefault("main_window", {}).update(
            {"width": self.width(), "height": self.height()}
        )
        self._settings.setdefault("ui", {}).update({
            "view_mode": self._dash.view_mode.value,
            "sidebar_open": self._btn_sidebar.isChecked(),
            "diagnostics_dock_visible": self._diag.isVisible(),
        })
        try:
            save_settings(self._settings)
        except OSError as exc:
            log.warning("Could not save settings: %s", exc)
        super().closeEvent(ev)
