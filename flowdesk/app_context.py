# FlowDesk application context
# Rev 1.0.0

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from flowdesk.repositories.supabase_backend import SupabaseBackend
from flowdesk.utils.config import BackendConfig
from flowdesk.viewmodels.dashboard_viewmodel import DashboardViewModel
from flowdesk.viewmodels.data_store import DataStore
from flowdesk.viewmodels.departments_viewmodel import DepartmentsViewModel
from flowdesk.viewmodels.members_viewmodel import MembersViewModel
from flowdesk.viewmodels.tasks_viewmodel import TasksViewModel


@dataclass
class AppContext:
    """Central container for shared app resources, handed to the UI root."""
    config: BackendConfig
    backend: SupabaseBackend
    store: DataStore
    dashboard: DashboardViewModel
    tasks: TasksViewModel
    departments: DepartmentsViewModel
    members: MembersViewModel

    @classmethod
    def create(cls, config: Optional[BackendConfig] = None, backend=None, runner=None) -> "AppContext":
        """Wire backend, store and view models. Nothing touches the network yet."""
        log = logging.getLogger("AppContext")
        config = config or BackendConfig.from_env()
        backend = backend or SupabaseBackend(config)
        store = DataStore(backend, runner)
        dashboard = DashboardViewModel(store)
        ctx = cls(
            config=config,
            backend=backend,
            store=store,
            dashboard=dashboard,
            tasks=TasksViewModel(store, backend, dashboard),
            departments=DepartmentsViewModel(store, backend, dashboard),
            members=MembersViewModel(store, backend),
        )
        log.info("AppContext initialized (backend configured: %s)", config.is_complete)
        return ctx

    def start(self) -> None:
        self.store.start()

    def shutdown(self) -> None:
        self.store.shutdown()
