# Rev 1.0.0
"""FlowDesk exception hierarchy."""
from __future__ import annotations


class FlowDeskError(Exception):
    """Base class for all FlowDesk errors."""


class BackendConnectionError(FlowDeskError):
    """A full fetch failed (network, API error or missing credentials)."""


class BackendWriteError(FlowDeskError):
    """An insert/update/delete was rejected or never reached the backend."""

    def __init__(self, table: str, action: str, message: str):
        self.table = table
        self.action = action
        super().__init__(f"{action} on '{table}' failed: {message}")


class ValidationError(FlowDeskError):
    """A required form field is empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")
