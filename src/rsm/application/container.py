from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rsm.application.orchestrator import DashboardController
from rsm.config import BackendSettings
from rsm.repositories.session_store import FileSessionStore
from rsm.repositories.supabase_repo import SupabaseRepository
from rsm.services.auth_service import AuthService
from rsm.services.inventory_service import InventoryService
from rsm.services.reporting_service import ReportingService
from rsm.services.transaction_service import TransactionService


@dataclass(frozen=True)
class AppContainer:
    repo: SupabaseRepository
    inventory: InventoryService
    transactions: TransactionService
    reporting: ReportingService
    auth: AuthService
    controller: DashboardController


def build_container(
    settings: BackendSettings,
    session_path: Path | str,
    async_refresh: bool = True,
) -> AppContainer:
    repo = SupabaseRepository(settings)

    inventory = InventoryService(repo)
    transactions = TransactionService(repo)
    reporting = ReportingService(repo)
    auth = AuthService(FileSessionStore(session_path))
    controller = DashboardController(
        inventory=inventory,
        transactions=transactions,
        reporting=reporting,
        auth=auth,
        async_refresh=async_refresh,
    )

    return AppContainer(
        repo=repo,
        inventory=inventory,
        transactions=transactions,
        reporting=reporting,
        auth=auth,
        controller=controller,
    )
