# tests/test_dashboard_viewmodel.py
from __future__ import annotations

from flowdesk.models.types import ViewMode


def test_defaults(dashboard):
    assert dashboard.selected_dept_id is None
    assert dashboard.view_mode is ViewMode.LIST
    assert dashboard.scope_title() == "All Tasks"
    assert len(dashboard.filtered_tasks()) == 4


def test_scope_header_follows_selection(dashboard):
    dashboard.select_department("d2")
    assert dashboard.scope_title() == "Engineering › Backend"
    assert dashboard.completed_count() == 0
    assert dashboard.progress() == 0

    dashboard.select_department(None)
    assert dashboard.completed_count() == 1
    assert dashboard.progress() == 25


def test_progress_ignores_search_and_status_filters(dashboard):
    dashboard.set_status_filter("Completed")
    dashboard.set_search("logo")
    assert [t.id for t in dashboard.filtered_tasks()] == ["t3"]
    assert dashboard.progress() == 25


def test_filters_emit_only_on_change(dashboard):
    hits = []
    dashboard.filtersChanged.connect(lambda: hits.append(1))
    dashboard.set_search("ana")
    dashboard.set_search("ana")
    dashboard.set_priority_filter("Critical")
    dashboard.set_priority_filter("")
    assert len(hits) == 3
    assert dashboard.priority_filter == "All"


def test_view_mode_switch(dashboard):
    modes = []
    dashboard.viewModeChanged.connect(modes.append)
    dashboard.set_view_mode(ViewMode.BOARD)
    dashboard.set_view_mode(ViewMode.BOARD)
    assert modes == [ViewMode.BOARD]
    assert ViewMode.parse("Timeline") is ViewMode.TIMELINE
    assert ViewMode.parse("bogus") is ViewMode.LIST
