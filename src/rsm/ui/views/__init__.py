from .login_view import LoginView
from .overview_view import OverviewView
from .add_product_view import AddProductView
from .history_view import HistoryView
from .sales_view import SalesView
from .transaction_dialog import TransactionDialog

__all__ = ["LoginView", "OverviewView", "AddProductView", "HistoryView", "SalesView", "TransactionDialog"]
