from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class InventoryRepository(Protocol):
    org_id: str

    def get_dashboard_kpis(self) -> Optional[dict]: ...
    def list_products(self) -> list[dict]: ...
    def list_recent_transactions(self, limit: int = 50) -> list[dict]: ...
    def list_sales_between(self, start: datetime, end: datetime | None = None) -> list[dict]: ...
    def add_product(self, row: dict) -> None: ...
    def create_transaction(
        self,
        product_id: str,
        txn_type: str,
        qty_kg: float,
        ref: Optional[str],
        note: Optional[str],
    ) -> dict: ...


class SessionFlagStore(Protocol):
    def is_logged_in(self) -> bool: ...
    def set_logged_in(self) -> None: ...
    def clear(self) -> None: ...
