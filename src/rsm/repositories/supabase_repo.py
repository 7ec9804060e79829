from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import requests

from rsm.config import BackendSettings
from rsm.domain.errors import BackendError


def _iso_utc(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc).isoformat()


class SupabaseRepository:
    """Thin PostgREST client for the inventory project.

    Every call is scoped by the configured org id. Transport errors and
    non-2xx responses are raised as BackendError.
    """

    def __init__(self, settings: BackendSettings, session: requests.Session | None = None):
        self.settings = settings
        self.org_id = settings.org_id
        self.base_url = f"{settings.url}/rest/v1"
        self._http = session or requests.Session()
        self._http.headers.update(
            {
                "apikey": settings.anon_key,
                "Authorization": f"Bearer {settings.anon_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    # ---------- transport ----------
    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            r = self._http.request(method, url, timeout=self.settings.timeout_seconds, **kwargs)
        except requests.RequestException as e:
            raise BackendError(f"Network error: {e}") from e

        if r.status_code >= 400:
            raise BackendError(self._error_message(r), status_code=r.status_code)
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from {path}", status_code=r.status_code) from e

    @staticmethod
    def _error_message(r: requests.Response) -> str:
        try:
            body = r.json()
        except ValueError:
            return r.text or f"HTTP {r.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body.get("hint") or f"HTTP {r.status_code}")
        return f"HTTP {r.status_code}"

    def rpc(self, fn: str, params: dict) -> Any:
        return self._request("POST", f"rpc/{fn}", json=params)

    def select(self, table: str, params: list[tuple[str, str]]) -> list[dict]:
        rows = self._request("GET", table, params=params)
        return rows if isinstance(rows, list) else []

    def insert(self, table: str, row: dict) -> None:
        self._request("POST", table, json=row, headers={"Prefer": "return=minimal"})

    # ---------- inventory queries ----------
    def get_dashboard_kpis(self) -> Optional[dict]:
        data = self.rpc("get_dashboard_kpis", {"p_org_id": self.org_id})
        if isinstance(data, list):
            data = data[0] if data else None
        return data if isinstance(data, dict) else None

    def list_products(self) -> list[dict]:
        return self.select(
            "inventory_on_hand",
            [("select", "*"), ("org_id", f"eq.{self.org_id}"), ("order", "sku.asc")],
        )

    def list_recent_transactions(self, limit: int = 50) -> list[dict]:
        return self.select(
            "inventory_txn",
            [
                ("select", "*,products(sku,name)"),
                ("org_id", f"eq.{self.org_id}"),
                ("order", "created_at.desc"),
                ("limit", str(int(limit))),
            ],
        )

    def list_sales_between(self, start: datetime, end: datetime | None = None) -> list[dict]:
        params = [
            ("select", "created_at,qty_kg"),
            ("org_id", f"eq.{self.org_id}"),
            ("type", "eq.OUT"),
            ("created_at", f"gte.{_iso_utc(start)}"),
        ]
        if end is not None:
            params.append(("created_at", f"lt.{_iso_utc(end)}"))
        params.append(("order", "created_at.asc"))
        return self.select("inventory_txn", params)

    def add_product(self, row: dict) -> None:
        self.insert("products", {"org_id": self.org_id, **row})

    def create_transaction(
        self,
        product_id: str,
        txn_type: str,
        qty_kg: float,
        ref: Optional[str],
        note: Optional[str],
    ) -> dict:
        data = self.rpc(
            "create_transaction",
            {
                "p_org_id": self.org_id,
                "p_product_id": product_id,
                "p_type": txn_type,
                "p_qty_kg": float(qty_kg),
                "p_ref": ref,
                "p_note": note,
            },
        )
        if isinstance(data, list):
            data = data[0] if data else None
        return data if isinstance(data, dict) else {}
