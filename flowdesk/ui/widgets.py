# Rev 1.0.0
# shared little widgets (avatar, badge, hint)
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QLabel, QSizePolicy

from flowdesk.services.derived import avatar_hue, initials

_MUTED = "#64748b"


def avatar(name: str, size: int = 28) -> QLabel:
    bg = QColor.fromHslF(avatar_hue(name) / 360.0, 0.6, 0.5).name()
    lab = QLabel(initials(name))
    lab.setFixedSize(size, size)
    lab.setAlignment(Qt.AlignCenter)
    lab.setToolTip(name or "Unassigned")
    lab.setStyleSheet(
        "QLabel {"
        f"  background-color: {bg};"
        "  color: #ffffff;"
        f"  border-radius: {size // 2}px;"
        f"  font-size: {max(8, int(size * 0.36))}px;"
        "  font-weight: 700;"
        "}"
    )
    return lab


def rgba(color: str, alpha: int) -> str:
    """Stylesheet colour with alpha (0-255); Qt reads 8-digit hex as #AARRGGBB."""
    c = QColor(color)
    c.setAlpha(alpha)
    return f"rgba({c.red()}, {c.green()}, {c.blue()}, {c.alpha()})"


def badge(label: str, color: str, *, small: bool = False) -> QLabel:
    lab = QLabel(label)
    lab.setStyleSheet(
        "QLabel {"
        f"  color: {color};"
        f"  background-color: {rgba(color, 0x22)};"
        f"  border: 1px solid {rgba(color, 0x44)};"
        "  border-radius: 8px;"
        f"  padding: {'1px 6px' if small else '2px 9px'};"
        f"  font-size: {10 if small else 11}px;"
        "  font-weight: 600;"
        "}"
    )
    lab.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    return lab


def hint(text: str) -> QLabel:
    lab = QLabel(text)
    lab.setAlignment(Qt.AlignCenter)
    lab.setStyleSheet(f"color: {_MUTED}; padding: 20px;")
    return lab
