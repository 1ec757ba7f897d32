# flowdesk/ui/diagnostics_dock.py
from pathlib import Path
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QDockWidget, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QPlainTextEdit, QLabel
from flowdesk.utils.logging_setup import log_file


def _tail(path: Path, max_lines: int = 500) -> str:
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
        return "".join(lines[-max_lines:])
    except FileNotFoundError:
        return "(no log yet)"
    except OSError as e:
        return f"(cannot read log: {e})"


class DiagnosticsDock(QDockWidget):
    """Live tail of the application log. The timer only runs while visible."""

    def __init__(self, parent=None):
        super().__init__("Diagnostics", parent)
        self.setObjectName("DiagnosticsDock")
        self.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.TopDockWidgetArea)
        self.setFeatures(QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetClosable)

        self._path = log_file()

        w = QWidget()
        lay = QVBoxLayout(w)
        top = QHBoxLayout()
        top.addWidget(QLabel(f"Log: {self._path}"), 1)
        self.btn_follow = QPushButton("Follow")
        self.btn_follow.setCheckable(True)
        self.btn_follow.setChecked(True)
        btn_reload = QPushButton("Reload")
        top.addWidget(self.btn_follow)
        top.addWidget(btn_reload)

        self.view = QPlainTextEdit()
        self.view.setReadOnly(True)
        self.view.setMaximumBlockCount(2000)

        lay.addLayout(top)
        lay.addWidget(self.view, 1)
        self.setWidget(w)

        self.timer = QTimer(self)
        self.timer.setInterval(2000)
        self.timer.timeout.connect(self.reload)

        btn_reload.clicked.connect(self.reload)
        self.btn_follow.toggled.connect(self._sync_timer)
        self.visibilityChanged.connect(self._sync_timer)

    def _sync_timer(self, *_):
        if self.isVisible() and self.btn_follow.isChecked():
            self.reload()
            self.timer.start()
        else:
            self.timer.stop()

    def reload(self):
        self.view.setPlainText(_tail(self._path))
        self.view.moveCursor(QTextCursor.End)
