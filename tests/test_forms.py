# tests/test_forms.py
from __future__ import annotations

from datetime import date

import pytest

from flowdesk.errors import ValidationError
from flowdesk.models.entities import Department, Task
from flowdesk.models.types import COLORS
from flowdesk.services.forms import DepartmentForm, TaskForm, member_payload


def test_blank_task_form_prefers_selected_department():
    depts = [Department(id="d1", name="Eng"), Department(id="d2", name="Ops")]
    assert TaskForm.blank(depts, "d2").dept_id == "d2"
    assert TaskForm.blank(depts, None).dept_id == "d1"
    assert TaskForm.blank([], None).dept_id == ""


def test_blank_task_form_defaults():
    f = TaskForm.blank()
    assert (f.status, f.priority, f.recurrence) == ("Not Started", "Medium", "None")


def test_task_payload_converts_blanks_and_tags():
    form = TaskForm(title="Plan sprint", dept_id="", due_date="", tags="a, b,,")
    payload = form.to_payload()
    assert payload["dept_id"] is None
    assert payload["due_date"] is None
    assert payload["tags"] == ["a", "b"]
    assert payload["title"] == "Plan sprint"


def test_task_payload_requires_title():
    with pytest.raises(ValidationError) as exc:
        TaskForm(title="   ").to_payload()
    assert exc.value.field == "title"


def test_form_from_task_round_trips_editable_fields():
    task = Task(id="t1", title="Fix", dept_id="d1", due_date=date(2025, 3, 1), tags=["x", "y"])
    form = TaskForm.from_task(task)
    assert form.due_date == "2025-03-01"
    assert form.tags == "x, y"
    assert form.to_payload()["due_date"] == "2025-03-01"


def test_department_form_cycles_palette():
    depts = [Department(id=i, name=str(i)) for i in range(12)]
    assert DepartmentForm.blank(depts).color == COLORS[2]
    assert DepartmentForm.blank([]).color == COLORS[0]


def test_department_form_sub_department():
    form = DepartmentForm.blank([], parent_id="d1")
    assert form.is_sub_department
    form.name = "Backend"
    assert form.to_payload()["parent_id"] == "d1"


def test_department_payload_requires_name():
    with pytest.raises(ValidationError):
        DepartmentForm(name="").to_payload()


def test_member_payload_trims():
    assert member_payload("  Ana  ") == {"name": "Ana"}
    with pytest.raises(ValidationError):
        member_payload("   ")
