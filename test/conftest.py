import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

ORG = "00000000-0000-0000-0000-000000000001"


def local_ts(*args) -> str:
    """Aware ISO timestamp for a wall-clock time in the local zone."""
    return datetime(*args).astimezone().isoformat()


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.astimezone()


class FakeInventoryRepo:
    """In-memory stand-in for the store, including its balance rule for OUT."""

    def __init__(self):
        from rsm.domain.errors import BackendError

        self._error = BackendError
        self.org_id = ORG
        self.products: list[dict] = []
        self.txns: list[dict] = []
        self.kpis = {"total_stock_kg": 0, "sku_count": 0, "low_stock_count": 0, "sales_7d_kg": 0}
        self.fail: set[str] = set()
        self.calls: list[str] = []

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail:
            raise self._error(f"{name} unavailable", status_code=503)

    def add_stock_product(self, product_id: str, name: str, on_hand: float = 0.0, reorder: float = 0.0,
                          name_th: str | None = None) -> None:
        self.products.append({
            "product_id": product_id,
            "sku": f"RICE-{len(self.products) + 1:04d}",
            "name": name,
            "name_th": name_th,
            "category": "Jasmine",
            "pack_size_kg": 25,
            "reorder_point_kg": reorder,
            "on_hand_kg": on_hand,
            "org_id": ORG,
        })

    def add_txn(self, txn_type: str, product_id: str, qty: float, created_at: str) -> None:
        name = next((p["name"] for p in self.products if p["product_id"] == product_id), None)
        self.txns.append({
            "id": f"t{len(self.txns) + 1}",
            "created_at": created_at,
            "type": txn_type,
            "product_id": product_id,
            "qty_kg": qty,
            "ref": None,
            "note": None,
            "org_id": ORG,
            "products": {"sku": "", "name": name},
        })

    # ---------- InventoryRepository ----------
    def get_dashboard_kpis(self):
        self._check("kpis")
        return dict(self.kpis)

    def list_products(self):
        self._check("products")
        return sorted(self.products, key=lambda p: p["sku"])

    def list_recent_transactions(self, limit: int = 50):
        self._check("transactions")
        return sorted(self.txns, key=lambda t: t["created_at"], reverse=True)[:limit]

    def list_sales_between(self, start, end=None):
        self._check("sales")
        from rsm.domain.models import parse_timestamp

        out = []
        for t in self.txns:
            ts = parse_timestamp(t["created_at"])
            if t["type"] != "OUT" or ts < _aware(start):
                continue
            if end is not None and ts >= _aware(end):
                continue
            out.append({"created_at": t["created_at"], "qty_kg": t["qty_kg"]})
        return out

    def add_product(self, row: dict) -> None:
        self._check("add_product")
        self.products.append({"product_id": f"p{len(self.products) + 1}", "on_hand_kg": 0, "org_id": ORG, **row})

    def create_transaction(self, product_id, txn_type, qty_kg, ref, note):
        self._check("create_transaction")
        product = next((p for p in self.products if p["product_id"] == product_id), None)
        if product is None:
            return {"success": False, "error": "Product not found"}
        if txn_type == "OUT" and qty_kg > product["on_hand_kg"]:
            return {"success": False, "error": f"Insufficient stock. Available: {product['on_hand_kg']}"}
        product["on_hand_kg"] += -qty_kg if txn_type == "OUT" else qty_kg
        self.add_txn(txn_type, product_id, qty_kg, datetime.now().astimezone().isoformat())
        return {"success": True}
