# Rev 1.0.0
# Board view: one column per status
from __future__ import annotations
from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel, QFrame, QScrollArea, QComboBox
)

from flowdesk.models.entities import Task
from flowdesk.models.types import PRIORITY_COLORS, STATUSES, STATUS_COLORS
from flowdesk.services import derived
from flowdesk.ui.widgets import avatar, badge

_CARD = "#0d0f1a"
_BORDER = "#1a1d2e"


class _TaskCard(QFrame):
    clicked = Signal()

    def mouseReleaseEvent(self, ev):
        if ev.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mouseReleaseEvent(ev)


class BoardView(QWidget):
    taskClicked = Signal(object)
    statusChangeRequested = Signal(object, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._columns: dict[str, QVBoxLayout] = {}
        self._counts: dict[str, QLabel] = {}

        row = QHBoxLayout()
        row.setSpacing(12)
        for status in STATUSES:
            row.addWidget(self._make_column(status), 1)

        body = QWidget()
        body.setLayout(row)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setWidget(body)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(scroll)

    def _make_column(self, status: str) -> QWidget:
        col = QWidget()
        lay = QVBoxLayout(col)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(8)

        head = QHBoxLayout()
        dot = QLabel("●")
        dot.setStyleSheet(f"color: {STATUS_COLORS[status]};")
        title = QLabel(status)
        title.setStyleSheet("font-weight: 700;")
        count = QLabel("0")
        count.setStyleSheet("color: #94a3b8;")
        head.addWidget(dot)
        head.addWidget(title)
        head.addStretch(1)
        head.addWidget(count)
        lay.addLayout(head)

        cards = QVBoxLayout()
        cards.setSpacing(8)
        lay.addLayout(cards)
        lay.addStretch(1)

        self._columns[status] = cards
        self._counts[status] = count
        return col

    # ---------- Public API ----------
    def set_tasks(self, tasks: List[Task], dashboard) -> None:
        groups = derived.group_by_status(tasks)
        for status, cards in self._columns.items():
            _clear(cards)
            col_tasks = groups.get(status, [])
            self._counts[status].setText(str(len(col_tasks)))
            for t in col_tasks:
                cards.addWidget(self._make_card(t, dashboard))

    # ---------- Internals ----------
    def _make_card(self, t: Task, dashboard) -> QWidget:
        prio_color = PRIORITY_COLORS.get(t.priority, "#475569")
        card = _TaskCard()
        card.setObjectName("TaskCard")
        card.setCursor(Qt.PointingHandCursor)
        card.setStyleSheet(
            "QFrame#TaskCard {"
            f"  background-color: {_CARD};"
            f"  border: 1px solid {_BORDER};"
            f"  border-left: 3px solid {prio_color};"
            "  border-radius: 10px;"
            "}"
        )
        card.clicked.connect(lambda task=t: self.taskClicked.emit(task))

        lay = QVBoxLayout(card)
        lay.setContentsMargins(12, 10, 12, 10)
        lay.setSpacing(6)

        dept = QLabel(dashboard.dept_name(t.dept_id))
        dept.setStyleSheet(f"color: {dashboard.dept_color(t.dept_id)}; font-size: 10px; font-weight: 600;")
        lay.addWidget(dept)

        title = QLabel(t.title)
        title.setWordWrap(True)
        title.setStyleSheet("font-weight: 600;")
        lay.addWidget(title)

        tags = QHBoxLayout()
        tags.addWidget(badge(t.priority, prio_color, small=True))
        if t.recurrence != "None":
            tags.addWidget(badge(f"🔄 {t.recurrence}", "#64748b", small=True))
        tags.addStretch(1)
        lay.addLayout(tags)

        foot = QHBoxLayout()
        if t.assignee:
            foot.addWidget(avatar(t.assignee, 22))
        foot.addStretch(1)
        if t.due_date:
            due = QLabel(t.due_date.isoformat())
            due.setStyleSheet("color: #475569; font-size: 10px;")
            foot.addWidget(due)
        lay.addLayout(foot)

        move = QComboBox()
        move.addItems(STATUSES)
        move.setCurrentText(t.status)
        move.currentTextChanged.connect(lambda s, tid=t.id: self.statusChangeRequested.emit(tid, s))
        lay.addWidget(move)
        return card


def _clear(layout) -> None:
    while (item := layout.takeAt(0)):
        w = item.widget()
        if w:
            w.deleteLater()
