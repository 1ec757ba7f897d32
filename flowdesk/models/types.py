# FlowDesk type definitions
# Rev 1.0.0

from __future__ import annotations
from enum import Enum
from typing import Literal, get_args

# Backend tables; subtasks/comments hang off tasks
Table = Literal["departments", "tasks", "subtasks", "comments", "members"]
TABLES = get_args(Table)

COLORS = [
    "#6366f1", "#8b5cf6", "#ec4899", "#f43f5e", "#f97316",
    "#eab308", "#22c55e", "#14b8a6", "#3b82f6", "#06b6d4",
]

STATUSES = ["Not Started", "In Progress", "Review", "Completed", "Blocked"]
STATUS_COLORS = {
    "Not Started": "#64748b",
    "In Progress": "#3b82f6",
    "Review":      "#a855f7",
    "Completed":   "#22c55e",
    "Blocked":     "#f43f5e",
}

PRIORITIES = ["Critical", "High", "Medium", "Low"]
PRIORITY_COLORS = {
    "Critical": "#f43f5e",
    "High":     "#f97316",
    "Medium":   "#eab308",
    "Low":      "#6366f1",
}

RECURRENCE = ["None", "Daily", "Weekly", "Bi-Weekly", "Monthly", "Quarterly", "Yearly"]

# Filter sentinel for the status/priority combos
ALL = "All"

COMPLETED = "Completed"
DEFAULT_STATUS = "Not Started"
DEFAULT_PRIORITY = "Medium"
DEFAULT_RECURRENCE = "None"
DEFAULT_ICON = "📁"

# No auth: every comment is written by the same placeholder identity
COMMENT_AUTHOR = "Team Member"

UNKNOWN_DEPT = "Unknown"
UNKNOWN_DEPT_COLOR = "#64748b"
OVERDUE_COLOR = "#f43f5e"


class ViewMode(Enum):
    LIST = "List"
    BOARD = "Board"
    TIMELINE = "Timeline"

    @classmethod
    def parse(cls, value: str | None) -> "ViewMode":
        for mode in cls:
            if mode.value == value or mode.name == value:
                return mode
        return cls.LIST
