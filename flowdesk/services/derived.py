# Rev 1.0.0

"""Derived views over the in-memory collections.
Everything here is pure and recomputed on demand; nothing is cached.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from flowdesk.models.entities import Department, Task
from flowdesk.models.types import (
    ALL, COMPLETED, STATUSES, UNKNOWN_DEPT, UNKNOWN_DEPT_COLOR,
)

MIN_TIMELINE_SPAN_DAYS = 7
TIMELINE_WIDTH_PCT = 90


# ---------- departments ----------

def find_department(departments: Iterable[Department], dept_id: Any) -> Optional[Department]:
    if dept_id is None or dept_id == "":
        return None
    return next((d for d in departments if d.id == dept_id), None)


def top_departments(departments: Sequence[Department]) -> List[Department]:
    return [d for d in departments if d.is_top_level]


def sub_departments(departments: Sequence[Department], parent_id: Any) -> List[Department]:
    return [d for d in departments if d.parent_id == parent_id]


def dept_display_name(departments: Sequence[Department], dept_id: Any) -> str:
    d = find_department(departments, dept_id)
    if d is None:
        return UNKNOWN_DEPT
    if d.parent_id:
        parent = find_department(departments, d.parent_id)
        return f"{parent.name} › {d.name}" if parent else d.name
    return d.name


def dept_color(departments: Sequence[Department], dept_id: Any) -> str:
    d = find_department(departments, dept_id)
    return d.color if d and d.color else UNKNOWN_DEPT_COLOR


def department_options(departments: Sequence[Department]) -> List[Tuple[Any, str]]:
    """(id, label) pairs: each top-level department followed by its children."""
    out: List[Tuple[Any, str]] = []
    for d in top_departments(departments):
        out.append((d.id, d.name))
        for s in sub_departments(departments, d.id):
            out.append((s.id, f"  └ {s.name}"))
    return out


# ---------- filtering / progress ----------

def task_matches(task: Task, *, dept_id: Any = None, search: str = "",
                 status: str = ALL, priority: str = ALL) -> bool:
    dept_ok = not dept_id or task.dept_id == dept_id
    needle = (search or "").lower()
    search_ok = not needle or needle in task.title.lower() or needle in (task.assignee or "").lower()
    status_ok = status == ALL or task.status == status
    priority_ok = priority == ALL or task.priority == priority
    return dept_ok and search_ok and status_ok and priority_ok


def filter_tasks(tasks: Iterable[Task], *, dept_id: Any = None, search: str = "",
                 status: str = ALL, priority: str = ALL) -> List[Task]:
    return [t for t in tasks
            if task_matches(t, dept_id=dept_id, search=search, status=status, priority=priority)]


def scoped_tasks(tasks: Sequence[Task], dept_id: Any = None) -> List[Task]:
    if not dept_id:
        return list(tasks)
    return [t for t in tasks if t.dept_id == dept_id]


def completed_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if t.status == COMPLETED)


def progress(tasks: Sequence[Task]) -> int:
    """Completion percentage, rounded half-up; 0 for an empty scope."""
    if not tasks:
        return 0
    return int(math.floor(completed_count(tasks) * 100 / len(tasks) + 0.5))


def group_by_status(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    cols: Dict[str, List[Task]] = {s: [] for s in STATUSES}
    for t in tasks:
        if t.status in cols:
            cols[t.status].append(t)
    return cols


# ---------- tags ----------

def parse_tags(text: str) -> List[str]:
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def format_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags or [])


# ---------- dates ----------

def is_overdue(task: Task, today: Optional[date] = None) -> bool:
    if task.due_date is None or task.status == COMPLETED:
        return False
    return task.due_date < (today or date.today())


@dataclass(frozen=True)
class TimelineEntry:
    task: Task
    position: float  # percent of the row width


@dataclass(frozen=True)
class TimelineLayout:
    entries: List[TimelineEntry]
    undated: int
    start: Optional[date] = None
    span_days: int = 0


def timeline_layout(tasks: Iterable[Task]) -> TimelineLayout:
    tasks = list(tasks)
    dated = sorted((t for t in tasks if t.due_date), key=lambda t: t.due_date)
    undated = len(tasks) - len(dated)
    if not dated:
        return TimelineLayout(entries=[], undated=undated)
    start = dated[0].due_date
    span = max((dated[-1].due_date - start).days, MIN_TIMELINE_SPAN_DAYS)
    entries = [
        TimelineEntry(task=t, position=(t.due_date - start).days / span * TIMELINE_WIDTH_PCT)
        for t in dated
    ]
    return TimelineLayout(entries=entries, undated=undated, start=start, span_days=span)


# ---------- people ----------

def initials(name: str) -> str:
    if not name:
        return "?"
    return "".join(part[0] for part in name.split() if part)[:2].upper() or "?"


def avatar_hue(name: str) -> int:
    return ord(name[0]) * 37 % 360 if name else 200


def subtask_counts(task: Task) -> Tuple[int, int]:
    return sum(1 for s in task.subtasks if s.done), len(task.subtasks)
