# tests/test_derived.py
from __future__ import annotations

from datetime import date

import pytest

from flowdesk.models.entities import Department, Subtask, Task
from flowdesk.services import derived


def _task(id, **kw) -> Task:
    kw.setdefault("title", f"task {id}")
    return Task(id=id, **kw)


@pytest.fixture()
def depts():
    return [
        Department(id="d1", name="Engineering", color="#6366f1"),
        Department(id="d2", name="Backend", color="#22c55e", parent_id="d1"),
        Department(id="d3", name="Design", color="#ec4899"),
        Department(id="d4", name="Orphan", parent_id="gone"),
    ]


# --- departments -----------------------------------------------------------

def test_display_name_for_sub_department_includes_parent(depts):
    assert derived.dept_display_name(depts, "d2") == "Engineering › Backend"
    assert derived.dept_display_name(depts, "d1") == "Engineering"


def test_display_name_unknown_and_orphan(depts):
    assert derived.dept_display_name(depts, "nope") == "Unknown"
    assert derived.dept_display_name(depts, None) == "Unknown"
    assert derived.dept_display_name(depts, "d4") == "Orphan"


def test_dept_color_falls_back_to_slate(depts):
    assert derived.dept_color(depts, "d3") == "#ec4899"
    assert derived.dept_color(depts, "missing") == "#64748b"


def test_department_options_nest_children_under_parent(depts):
    opts = derived.department_options(depts)
    assert opts == [("d1", "Engineering"), ("d2", "  └ Backend"), ("d3", "Design")]


# --- filtering -------------------------------------------------------------

@pytest.fixture()
def tasks():
    return [
        _task("a", title="Fix login bug", dept_id="d2", status="In Progress", priority="High", assignee="Ana"),
        _task("b", title="Docs", dept_id="d1", status="Not Started", priority="Low", assignee="Ben"),
        _task("c", title="Logo", dept_id="d3", status="Completed", priority="Medium"),
        _task("d", title="API review", dept_id="d2", status="Not Started", priority="Critical", assignee="ana"),
    ]


@pytest.mark.parametrize(
    "kw, expected",
    [
        ({}, ["a", "b", "c", "d"]),
        ({"dept_id": "d2"}, ["a", "d"]),
        ({"search": "LOGIN"}, ["a"]),
        ({"search": "ana"}, ["a", "d"]),
        ({"status": "Not Started"}, ["b", "d"]),
        ({"priority": "Critical"}, ["d"]),
        ({"dept_id": "d2", "status": "Not Started", "search": "api"}, ["d"]),
        ({"dept_id": "d3", "priority": "High"}, []),
        ({"status": "All", "priority": "All"}, ["a", "b", "c", "d"]),
    ],
)
def test_filter_is_a_conjunction(tasks, kw, expected):
    assert [t.id for t in derived.filter_tasks(tasks, **kw)] == expected


def test_selecting_parent_does_not_include_sub_department_tasks(tasks):
    assert derived.scoped_tasks(tasks, "d1") == [tasks[1]]
    assert derived.scoped_tasks(tasks, None) == tasks


def test_progress_rounds_and_handles_empty(tasks):
    assert derived.progress([]) == 0
    assert derived.progress(tasks) == 25
    assert derived.progress(tasks[:3]) == 33
    two_of_three = [_task(i, status="Completed") for i in "xy"] + [_task("z")]
    assert derived.progress(two_of_three) == 67


def test_group_by_status_keeps_every_column(tasks):
    cols = derived.group_by_status(tasks)
    assert list(cols) == ["Not Started", "In Progress", "Review", "Completed", "Blocked"]
    assert [t.id for t in cols["Not Started"]] == ["b", "d"]
    assert cols["Review"] == []


# --- tags / dates ----------------------------------------------------------

def test_tags_parse_and_format():
    assert derived.parse_tags(" design, ,urgent ,") == ["design", "urgent"]
    assert derived.parse_tags("") == []
    assert derived.format_tags(["a", "b"]) == "a, b"
    assert derived.format_tags(derived.parse_tags("design, urgent,  review")) == "design, urgent, review"


def test_overdue_ignores_completed_and_undated():
    today = date(2025, 3, 5)
    assert derived.is_overdue(_task("a", due_date=date(2025, 3, 1)), today)
    assert not derived.is_overdue(_task("b", due_date=date(2025, 3, 1), status="Completed"), today)
    assert not derived.is_overdue(_task("c"), today)
    assert not derived.is_overdue(_task("d", due_date=today), today)


def test_timeline_positions_relative_to_span():
    tasks = [
        _task("late", due_date=date(2025, 1, 11)),
        _task("start", due_date=date(2025, 1, 1)),
        _task("mid", due_date=date(2025, 1, 4)),
        _task("none"),
    ]
    layout = derived.timeline_layout(tasks)
    assert [e.task.id for e in layout.entries] == ["start", "mid", "late"]
    assert [round(e.position, 6) for e in layout.entries] == [0, 27, 90]
    assert layout.undated == 1
    assert layout.start == date(2025, 1, 1)
    assert layout.span_days == 10


def test_timeline_span_has_a_one_week_minimum():
    layout = derived.timeline_layout([_task("a", due_date=date(2025, 1, 1)),
                                      _task("b", due_date=date(2025, 1, 2))])
    assert layout.span_days == 7
    assert layout.entries[1].position == pytest.approx(90 / 7)


def test_timeline_without_dates():
    layout = derived.timeline_layout([_task("a"), _task("b")])
    assert layout.entries == []
    assert layout.undated == 2


# --- people ----------------------------------------------------------------

def test_initials_and_hue():
    assert derived.initials("ana maria diaz") == "AM"
    assert derived.initials("") == "?"
    assert derived.avatar_hue("A") == 65 * 37 % 360
    assert derived.avatar_hue("") == 200


def test_subtask_counts():
    t = _task("a", subtasks=[Subtask(id=1, task_id="a", title="x", done=True),
                             Subtask(id=2, task_id="a", title="y")])
    assert derived.subtask_counts(t) == (1, 2)
