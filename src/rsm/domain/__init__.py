from .models import (
    CATEGORIES,
    DashboardKPIs,
    MutationResult,
    Product,
    SalesDelta,
    SalesPoint,
    SaleRecord,
    Transaction,
    TXN_TYPES,
)
from .errors import AppError, ValidationError, AuthorizationError, BackendError

__all__ = [
    "CATEGORIES",
    "DashboardKPIs",
    "MutationResult",
    "Product",
    "SalesDelta",
    "SalesPoint",
    "SaleRecord",
    "Transaction",
    "TXN_TYPES",
    "AppError",
    "ValidationError",
    "AuthorizationError",
    "BackendError",
]
