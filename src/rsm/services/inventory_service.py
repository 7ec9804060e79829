from __future__ import annotations

import logging
import math
import time
from typing import Callable, Iterable, Optional

from rsm.domain.errors import BackendError, ValidationError
from rsm.domain.models import CATEGORIES, MutationResult, Product
from rsm.repositories.contracts import InventoryRepository

log = logging.getLogger(__name__)


def _parse_float(s: object, field: str, default: Optional[float] = None) -> float:
    text = "" if s is None else str(s).strip()
    if text == "":
        if default is None:
            raise ValidationError(f"{field} is required.")
        return default
    try:
        value = float(text)
    except ValueError:
        value = math.nan
    # float() accepts "nan" and "inf"
    if not math.isfinite(value):
        if default is None:
            raise ValidationError(f"{field} must be a number.")
        return default
    return value


def filter_products(products: Iterable[Product], query: str) -> list[Product]:
    q = (query or "").lower()
    if not q:
        return list(products)
    return [
        p for p in products
        if q in p.name.lower() or (p.name_th and q in p.name_th.lower())
    ]


def generate_sku(now: Callable[[], float] = time.time) -> str:
    return f"RICE-{int(now() * 1000)}"


class InventoryService:
    def __init__(self, repo: InventoryRepository, clock: Callable[[], float] = time.time):
        self.repo = repo
        self.clock = clock

    def fetch_products(self) -> Optional[list[Product]]:
        try:
            rows = self.repo.list_products()
            return [Product.from_row(r) for r in rows]
        except (BackendError, KeyError, TypeError, ValueError) as e:
            log.warning("fetch_products_failed error=%s", e)
            return None

    def build_product_row(self, form: dict) -> dict:
        name = str(form.get("name") or "").strip()
        name_th = str(form.get("name_th") or "").strip() or None
        category = str(form.get("category") or "").strip()

        if not name:
            raise ValidationError("Name is required.")
        if category not in CATEGORIES:
            raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}.")

        pack_size = _parse_float(form.get("pack_size_kg"), "Pack size (kg)")
        if pack_size <= 0:
            raise ValidationError("Pack size (kg) must be > 0.")

        reorder = _parse_float(form.get("reorder_point_kg"), "Reorder point (kg)", default=0.0)
        if reorder < 0:
            reorder = 0.0

        return {
            "sku": generate_sku(self.clock),
            "name": name,
            "name_th": name_th,
            "category": category,
            "pack_size_kg": pack_size,
            "reorder_point_kg": reorder,
        }

    def create_product(self, form: dict) -> MutationResult:
        try:
            row = self.build_product_row(form)
        except ValidationError as e:
            return MutationResult.failure(str(e))

        try:
            self.repo.add_product(row)
        except BackendError as e:
            log.warning("create_product_failed sku=%s status=%s error=%s", row["sku"], e.status_code, e.message)
            return MutationResult.failure(e.message)

        log.info("product_created sku=%s name=%s category=%s", row["sku"], row["name"], row["category"])
        return MutationResult.success()
