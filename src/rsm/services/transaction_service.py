from __future__ import annotations

import logging
import math
from typing import Optional

from rsm.domain.errors import BackendError, ValidationError
from rsm.domain.models import TXN_TYPES, MutationResult, Transaction
from rsm.repositories.contracts import InventoryRepository

log = logging.getLogger("rsm.txn")

RECENT_LIMIT = 50


def _optional_text(value: object) -> Optional[str]:
    text = "" if value is None else str(value).strip()
    return text or None


class TransactionService:
    def __init__(self, repo: InventoryRepository):
        self.repo = repo

    def fetch_transactions(self) -> Optional[list[Transaction]]:
        try:
            rows = self.repo.list_recent_transactions(RECENT_LIMIT)
            return [Transaction.from_row(r) for r in rows]
        except (BackendError, KeyError, TypeError, ValueError) as e:
            log.warning("fetch_transactions_failed error=%s", e)
            return None

    def _validate(self, txn_type: str, product_id: str, qty_kg: object) -> tuple[str, str, float]:
        txn_type = (txn_type or "").strip().upper()
        product_id = (product_id or "").strip()
        if txn_type not in TXN_TYPES:
            raise ValidationError(f"Type must be one of: {', '.join(TXN_TYPES)}.")
        if not product_id:
            raise ValidationError("Product is required.")
        try:
            qty = float(str(qty_kg).strip())
        except ValueError:
            raise ValidationError("Quantity (kg) must be a number.")
        if not math.isfinite(qty):
            raise ValidationError("Quantity (kg) must be a number.")
        if qty <= 0:
            raise ValidationError("Quantity (kg) must be > 0.")
        return txn_type, product_id, qty

    def create_transaction(
        self,
        txn_type: str,
        product_id: str,
        qty_kg: object,
        ref: object = None,
        note: object = None,
    ) -> MutationResult:
        """
        Balance rules (e.g. OUT larger than on-hand) are enforced by the
        create_transaction procedure; its verdict is returned as-is.
        """
        try:
            txn_type, product_id, qty = self._validate(txn_type, product_id, qty_kg)
        except ValidationError as e:
            return MutationResult.failure(str(e))

        try:
            data = self.repo.create_transaction(product_id, txn_type, qty, _optional_text(ref), _optional_text(note))
        except BackendError as e:
            log.warning("txn_failed type=%s product=%s qty=%.2f error=%s", txn_type, product_id, qty, e.message)
            return MutationResult.failure(e.message)

        if data and not data.get("success", True):
            reason = str(data.get("error") or "Transaction rejected.")
            log.warning("txn_rejected type=%s product=%s qty=%.2f reason=%s", txn_type, product_id, qty, reason)
            return MutationResult.failure(reason)

        log.info("txn_created type=%s product=%s qty=%.2f", txn_type, product_id, qty)
        return MutationResult.success()
