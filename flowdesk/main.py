# Rev 1.0.0

# flowdesk/main.py
import sys
from PySide6.QtGui import QFont
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from flowdesk.app_context import AppContext
from flowdesk.ui.main_window import MainWindow
from flowdesk.utils.config import load_settings
from flowdesk.utils.logging_setup import setup_logging


def main():
    app = QApplication(sys.argv)
    QCoreApplication.setOrganizationName("flowdesk")
    QCoreApplication.setApplicationName("FlowDesk")
    app.setFont(QFont("Sans Serif", 10))

    logfile = setup_logging()
    print(f"[logging] Writing to: {logfile}")

    # --- DI wiring ---
    ctx = AppContext.create()

    # --- UI ---
    win = MainWindow(ctx, settings=load_settings())
    win.show()
    app.aboutToQuit.connect(ctx.shutdown)

    # first fetch + realtime once the window is up
    ctx.start()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
