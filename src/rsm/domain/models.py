from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

CATEGORIES = ("Jasmine", "White", "Brown", "Sticky", "Specialty")
TXN_TYPES = ("IN", "OUT", "ADJUST")


def _num(value: object, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    category: str
    pack_size_kg: float
    reorder_point_kg: float = 0.0
    on_hand_kg: float = 0.0
    name_th: Optional[str] = None
    sku: Optional[str] = None
    org_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Product":
        return cls(
            product_id=str(row["product_id"]),
            name=str(row.get("name") or ""),
            category=str(row.get("category") or ""),
            pack_size_kg=_num(row.get("pack_size_kg")),
            reorder_point_kg=_num(row.get("reorder_point_kg")),
            on_hand_kg=_num(row.get("on_hand_kg")),
            name_th=row.get("name_th") or None,
            sku=row.get("sku"),
            org_id=row.get("org_id"),
        )

    @property
    def is_out(self) -> bool:
        return self.on_hand_kg <= 0

    @property
    def is_low(self) -> bool:
        return self.reorder_point_kg > 0 and self.on_hand_kg < self.reorder_point_kg

    @property
    def status(self) -> str:
        if self.is_out:
            return "out"
        if self.is_low:
            return "low"
        return "ok"


@dataclass(frozen=True)
class Transaction:
    id: str
    created_at: datetime
    type: str
    product_id: str
    qty_kg: float
    ref: Optional[str] = None
    note: Optional[str] = None
    product_name: Optional[str] = None
    org_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Transaction":
        joined = row.get("products") or {}
        return cls(
            id=str(row["id"]),
            created_at=parse_timestamp(str(row["created_at"])),
            type=str(row.get("type") or ""),
            product_id=str(row.get("product_id") or ""),
            qty_kg=_num(row.get("qty_kg")),
            ref=row.get("ref") or None,
            note=row.get("note") or None,
            product_name=joined.get("name") if isinstance(joined, dict) else None,
            org_id=row.get("org_id"),
        )

    @property
    def created_local(self) -> datetime:
        return self.created_at.astimezone()


@dataclass(frozen=True)
class DashboardKPIs:
    total_stock_kg: float = 0.0
    sku_count: int = 0
    low_stock_count: int = 0
    sales_7d_kg: float = 0.0

    @classmethod
    def from_row(cls, row: dict) -> "DashboardKPIs":
        return cls(
            total_stock_kg=_num(row.get("total_stock_kg")),
            sku_count=int(_num(row.get("sku_count"))),
            low_stock_count=int(_num(row.get("low_stock_count"))),
            sales_7d_kg=_num(row.get("sales_7d_kg")),
        )


@dataclass(frozen=True)
class SalesDelta:
    value: float
    is_positive: bool


@dataclass(frozen=True)
class SaleRecord:
    created_at: datetime
    qty_kg: float

    @classmethod
    def from_row(cls, row: dict) -> "SaleRecord":
        return cls(created_at=parse_timestamp(str(row["created_at"])), qty_kg=_num(row.get("qty_kg")))


@dataclass(frozen=True)
class SalesPoint:
    day: date
    total_kg: float

    @property
    def label(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "MutationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "MutationResult":
        return cls(ok=False, error=error)


def parse_timestamp(value: str) -> datetime:
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        # naive store timestamps are UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
