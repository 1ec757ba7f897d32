# Rev 1.0.0
# Timeline view: tasks placed along a date axis
from __future__ import annotations
from datetime import date, timedelta
from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QScrollArea, QPushButton, QSizePolicy
)

from flowdesk.models.entities import Task
from flowdesk.models.types import OVERDUE_COLOR
from flowdesk.services import derived
from flowdesk.ui.widgets import hint

_TICKS = 5


class _Track(QWidget):
    """One timeline row; the bar's x is a percentage of the track width."""

    def __init__(self, bar: QPushButton, position: float, parent=None):
        super().__init__(parent)
        self._bar = bar
        self._position = position
        bar.setParent(self)
        self.setMinimumHeight(32)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

    def resizeEvent(self, ev):
        super().resizeEvent(ev)
        x = int(self.width() * self._position / 100.0)
        w = min(200, max(60, self.width() - x))
        self._bar.setGeometry(x, 4, w, 24)


class TimelineView(QWidget):
    taskClicked = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows = QVBoxLayout()
        self._rows.setSpacing(6)

        body = QWidget()
        body.setLayout(self._rows)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(body)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(scroll)

    # ---------- Public API ----------
    def set_tasks(self, tasks: List[Task], dashboard) -> None:
        self._clear()
        layout = derived.timeline_layout(tasks)
        if not layout.entries:
            self._rows.addWidget(hint("No tasks with due dates to display on timeline."))
            self._rows.addStretch(1)
            return

        self._rows.addLayout(self._axis(layout))
        today = date.today()
        for entry in layout.entries:
            self._rows.addWidget(self._row(entry.task, entry.position, dashboard, today))

        if layout.undated:
            more = QLabel(f"+ {layout.undated} tasks without due dates")
            more.setStyleSheet("color: #475569; margin-top: 16px;")
            self._rows.addWidget(more)
        self._rows.addStretch(1)

    # ---------- Internals ----------
    def _axis(self, layout) -> QHBoxLayout:
        axis = QHBoxLayout()
        axis.addSpacing(200)
        for i in range(_TICKS):
            d = layout.start + timedelta(days=round(layout.span_days * i / (_TICKS - 1)))
            lbl = QLabel(d.strftime("%b %d"))
            lbl.setStyleSheet("color: #475569; font-size: 10px;")
            axis.addWidget(lbl, 1, Qt.AlignLeft)
        return axis

    def _row(self, t: Task, position: float, dashboard, today: date) -> QWidget:
        overdue = derived.is_overdue(t, today)
        color = OVERDUE_COLOR if overdue else dashboard.dept_color(t.dept_id)

        row = QWidget()
        lay = QHBoxLayout(row)
        lay.setContentsMargins(0, 0, 0, 0)

        name = QLabel(t.title)
        name.setFixedWidth(200)
        name.setToolTip(f"{t.title} — {t.due_date.isoformat()}")
        lay.addWidget(name)

        bar = QPushButton(t.due_date.strftime("%b %d"))
        bar.setCursor(Qt.PointingHandCursor)
        bar.setStyleSheet(
            "QPushButton {"
            f"  background-color: {color};"
            "  color: #ffffff;"
            "  border: none;"
            "  border-radius: 4px;"
            "  padding: 2px 10px;"
            "  font-weight: 600;"
            "}"
        )
        bar.clicked.connect(lambda _=False, task=t: self.taskClicked.emit(task))
        lay.addWidget(_Track(bar, position), 1)
        return row

    def _clear(self) -> None:
        while (item := self._rows.takeAt(0)):
            w = item.widget()
            if w:
                w.deleteLater()
            elif item.layout() is not None:
                _clear_layout(item.layout())


def _clear_layout(layout) -> None:
    while (item := layout.takeAt(0)):
        w = item.widget()
        if w:
            w.deleteLater()
