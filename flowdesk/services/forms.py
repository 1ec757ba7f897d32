# Rev 1.0.0
"""Editable mirrors of Task/Department used by the editor dialogs.

All fields are strings while editing; optional values use "" as the empty
sentinel. ``to_payload`` validates and converts back to backend columns.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Sequence

from flowdesk.errors import ValidationError
from flowdesk.models.entities import Department, Task
from flowdesk.models.types import (
    COLORS, DEFAULT_ICON, DEFAULT_PRIORITY, DEFAULT_RECURRENCE, DEFAULT_STATUS,
)
from flowdesk.services.derived import format_tags, parse_tags


def _none_if_blank(value: Any) -> Any:
    return None if value == "" or value is None else value


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    dept_id: Any = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    assignee: str = ""
    due_date: str = ""       # YYYY-MM-DD or ""
    recurrence: str = DEFAULT_RECURRENCE
    tags: str = ""           # comma-separated

    @classmethod
    def blank(cls, departments: Sequence[Department] = (), selected_dept_id: Any = None) -> "TaskForm":
        if selected_dept_id:
            dept_id = selected_dept_id
        elif departments:
            dept_id = departments[0].id
        else:
            dept_id = ""
        return cls(dept_id=dept_id)

    @classmethod
    def from_task(cls, task: Task) -> "TaskForm":
        return cls(
            title=task.title,
            description=task.description or "",
            dept_id=task.dept_id if task.dept_id is not None else "",
            status=task.status,
            priority=task.priority,
            assignee=task.assignee or "",
            due_date=task.due_date.isoformat() if task.due_date else "",
            recurrence=task.recurrence,
            tags=format_tags(task.tags),
        )

    def to_payload(self) -> Dict[str, Any]:
        if not self.title.strip():
            raise ValidationError("title")
        payload = asdict(self)
        payload["tags"] = parse_tags(self.tags)
        payload["dept_id"] = _none_if_blank(self.dept_id)
        payload["due_date"] = _none_if_blank(self.due_date.strip())
        return payload


@dataclass
class DepartmentForm:
    name: str = ""
    color: str = COLORS[0]
    icon: str = DEFAULT_ICON
    parent_id: Any = None    # fixed when the editor opens

    @classmethod
    def blank(cls, departments: Sequence[Department] = (), parent_id: Any = None) -> "DepartmentForm":
        return cls(color=COLORS[len(departments) % len(COLORS)], parent_id=parent_id)

    @classmethod
    def from_department(cls, dept: Department) -> "DepartmentForm":
        return cls(name=dept.name, color=dept.color, icon=dept.icon or DEFAULT_ICON,
                   parent_id=dept.parent_id or None)

    @property
    def is_sub_department(self) -> bool:
        return bool(self.parent_id)

    def to_payload(self) -> Dict[str, Any]:
        if not self.name.strip():
            raise ValidationError("name")
        return {"name": self.name, "color": self.color, "icon": self.icon, "parent_id": self.parent_id}


def member_payload(name: Optional[str]) -> Dict[str, Any]:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name")
    return {"name": name}
