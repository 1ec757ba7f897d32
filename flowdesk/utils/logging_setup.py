# Rev 1.0.0

# FlowDesk – logging setup
from __future__ import annotations
import logging, os, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from PySide6.QtCore import qInstallMessageHandler, QtMsgType

from flowdesk.utils.paths import APP_NAME, logs_dir


def _qt_handler(msg_type, context, message):
    lvl = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }.get(msg_type, logging.INFO)
    logging.getLogger("qt").log(lvl, message)


FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"

_log_file: Path | None = None


def log_file() -> Path:
    """Path of the active log file (or where it would be written)."""
    return _log_file or logs_dir() / f"{APP_NAME}.log"


def setup_logging(app_name: str = APP_NAME) -> Path:
    global _log_file
    if _log_file is not None:
        return _log_file

    # Level via env (DEBUG/INFO/WARNING/ERROR), default INFO
    level_name = os.environ.get("FLOWDESK_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logfile = logs_dir() / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(level)

    # File: rotate at 5MB, keep 7 backups
    fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=7, encoding="utf-8")
    fh.setFormatter(logging.Formatter(FMT, DATEFMT))
    fh.setLevel(level)
    root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(logging.Formatter(FMT, DATEFMT))
    ch.setLevel(level)
    root.addHandler(ch)

    # the realtime stack is chatty at DEBUG
    for noisy in ("httpx", "httpcore", "websockets", "realtime"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    # Uncaught exceptions → log as ERROR
    def _excepthook(exctype, value, tb):
        logging.getLogger("unhandled").error("Uncaught exception", exc_info=(exctype, value, tb))
        sys.__excepthook__(exctype, value, tb)
    sys.excepthook = _excepthook

    # route Qt warnings into the same file
    qInstallMessageHandler(_qt_handler)

    _log_file = logfile
    logging.getLogger(__name__).info("Logging initialized at %s; file: %s", level_name, logfile)
    return logfile
