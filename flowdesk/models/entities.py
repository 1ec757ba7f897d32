# Rev 1.0.0
"""Lightweight entities mirroring the backend tables.

Rows come back from the backend as plain dicts; ``from_row`` is tolerant of
missing keys and nulls so a half-populated row never breaks rendering.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional

from flowdesk.models.types import (
    COLORS, DEFAULT_ICON, DEFAULT_PRIORITY, DEFAULT_RECURRENCE, DEFAULT_STATUS,
)


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        # timestamps ("2025-03-01T00:00:00+00:00") keep only the date part
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


@dataclass
class Department:
    id: Any
    name: str
    color: str = COLORS[0]
    icon: str = DEFAULT_ICON
    parent_id: Any = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Department":
        return cls(
            id=row.get("id"),
            name=row.get("name") or "",
            color=row.get("color") or COLORS[0],
            icon=row.get("icon") or DEFAULT_ICON,
            parent_id=row.get("parent_id"),
            created_at=row.get("created_at"),
        )

    @property
    def is_top_level(self) -> bool:
        return not self.parent_id


@dataclass
class Subtask:
    id: Any
    task_id: Any
    title: str
    done: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Subtask":
        return cls(
            id=row.get("id"),
            task_id=row.get("task_id"),
            title=row.get("title") or "",
            done=bool(row.get("done")),
        )


@dataclass
class Comment:
    id: Any
    task_id: Any
    text: str
    author: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Comment":
        return cls(
            id=row.get("id"),
            task_id=row.get("task_id"),
            text=row.get("text") or "",
            author=row.get("author") or "",
            created_at=row.get("created_at"),
        )


@dataclass
class Task:
    id: Any
    title: str
    description: str = ""
    dept_id: Any = None
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    assignee: str = ""
    due_date: Optional[date] = None
    recurrence: str = DEFAULT_RECURRENCE
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    subtasks: List[Subtask] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Task":
        comments = [Comment.from_row(c) for c in row.get("comments") or []]
        comments.sort(key=lambda c: c.created_at or "")
        return cls(
            id=row.get("id"),
            title=row.get("title") or "",
            description=row.get("description") or "",
            dept_id=row.get("dept_id"),
            status=row.get("status") or DEFAULT_STATUS,
            priority=row.get("priority") or DEFAULT_PRIORITY,
            assignee=row.get("assignee") or "",
            due_date=_parse_date(row.get("due_date")),
            recurrence=row.get("recurrence") or DEFAULT_RECURRENCE,
            tags=list(row.get("tags") or []),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            subtasks=[Subtask.from_row(s) for s in row.get("subtasks") or []],
            comments=comments,
        )

    def copy(self) -> "Task":
        """Detached copy safe to patch optimistically."""
        return replace(
            self,
            tags=list(self.tags),
            subtasks=[replace(s) for s in self.subtasks],
            comments=[replace(c) for c in self.comments],
        )


@dataclass
class Member:
    id: Any
    name: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Member":
        return cls(id=row.get("id"), name=row.get("name") or "")


@dataclass
class Snapshot:
    """One complete read of the backend."""
    departments: List[Department] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)

    @classmethod
    def from_rows(cls, departments, tasks, members) -> "Snapshot":
        return cls(
            departments=[Department.from_row(r) for r in departments or []],
            tasks=[Task.from_row(r) for r in tasks or []],
            members=[Member.from_row(r) for r in members or []],
        )
