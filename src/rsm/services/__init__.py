from .auth_service import AuthService, FixedPairAuthenticator
from .inventory_service import InventoryService, filter_products
from .reporting_service import ReportingService, compute_sales_delta, compute_sales_series
from .transaction_service import TransactionService

__all__ = [
    "AuthService",
    "FixedPairAuthenticator",
    "InventoryService",
    "filter_products",
    "ReportingService",
    "compute_sales_delta",
    "compute_sales_series",
    "TransactionService",
]
