# Rev 1.0.0

# flowdesk/ui/window_mode.py
from PySide6.QtCore import Qt, QRect
from PySide6.QtGui import QGuiApplication


def restore_size(win, settings: dict, *, key: str = "main_window"):
    """
    Size a top-level window from saved settings, clamped to the screen it
    opens on.
    """
    screen = QGuiApplication.screenAt(win.frameGeometry().center()) or QGuiApplication.primaryScreen()
    rect: QRect = screen.availableGeometry()
    saved = settings.get(key, {})
    w = min(int(saved.get("width", 1280)), rect.width())
    h = min(int(saved.get("height", 800)), rect.height())
    win.resize(w, h)


def lock_dialog_fixed(win, *, width_ratio=0.4, height_ratio=0.6):
    """
    For modal dialogs: keep them *not* maximized, but non-resizable and sized
    as a fraction of the current screen.
    """
    screen = QGuiApplication.screenAt(win.frameGeometry().center()) or QGuiApplication.primaryScreen()
    rect: QRect = screen.availableGeometry()
    w = int(rect.width() * width_ratio)
    h = int(rect.height() * height_ratio)
    win.setFixedSize(w, h)
    win.setWindowFlag(Qt.WindowMaximizeButtonHint, False)
