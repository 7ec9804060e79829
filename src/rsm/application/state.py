from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Optional, Union

from rsm.domain.models import TXN_TYPES, DashboardKPIs, Product, SalesDelta, SalesPoint, Transaction
from rsm.services.inventory_service import filter_products

TABS = ("overview", "products", "transactions", "sales")


@dataclass(frozen=True)
class DashboardState:
    products: tuple[Product, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    kpis: Optional[DashboardKPIs] = None
    sales_delta: Optional[SalesDelta] = None
    sales_series: tuple[SalesPoint, ...] = ()
    loading: bool = False
    search_query: str = ""
    modal_open: bool = False
    selected_product_id: str = ""
    modal_txn_type: str = "IN"
    active_tab: str = "overview"
    is_logged_in: bool = False
    auth_error: str = ""
    refresh_token: int = 0

    @property
    def visible_products(self) -> list[Product]:
        return filter_products(self.products, self.search_query)

    @property
    def kpis_or_default(self) -> DashboardKPIs:
        return self.kpis or DashboardKPIs()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------- actions ----------
@dataclass(frozen=True)
class RefreshStarted:
    token: int


@dataclass(frozen=True)
class RefreshFinished:
    token: int


@dataclass(frozen=True)
class KpisLoaded:
    token: int
    kpis: DashboardKPIs


@dataclass(frozen=True)
class ProductsLoaded:
    token: int
    products: tuple[Product, ...]


@dataclass(frozen=True)
class TransactionsLoaded:
    token: int
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class SalesSeriesLoaded:
    token: int
    series: tuple[SalesPoint, ...]


@dataclass(frozen=True)
class SalesDeltaLoaded:
    token: int
    delta: Optional[SalesDelta]


@dataclass(frozen=True)
class SearchChanged:
    query: str


@dataclass(frozen=True)
class TabSelected:
    tab: str


@dataclass(frozen=True)
class TransactionModalOpened:
    product_id: str = ""
    txn_type: str = "IN"


@dataclass(frozen=True)
class TransactionModalClosed:
    pass


@dataclass(frozen=True)
class ProductSelected:
    product_id: str


@dataclass(frozen=True)
class LoginSucceeded:
    pass


@dataclass(frozen=True)
class LoginFailed:
    message: str


@dataclass(frozen=True)
class LoggedOut:
    pass


RefreshResult = Union[KpisLoaded, ProductsLoaded, TransactionsLoaded, SalesSeriesLoaded, SalesDeltaLoaded]
Action = Union[
    RefreshStarted, RefreshFinished, RefreshResult, SearchChanged, TabSelected,
    TransactionModalOpened, TransactionModalClosed, ProductSelected,
    LoginSucceeded, LoginFailed, LoggedOut,
]


def _apply_result(state: DashboardState, action: RefreshResult) -> DashboardState:
    # results from a superseded refresh are dropped
    if action.token != state.refresh_token:
        return state
    if isinstance(action, KpisLoaded):
        return replace(state, kpis=action.kpis)
    if isinstance(action, ProductsLoaded):
        return replace(state, products=tuple(action.products))
    if isinstance(action, TransactionsLoaded):
        return replace(state, transactions=tuple(action.transactions))
    if isinstance(action, SalesSeriesLoaded):
        return replace(state, sales_series=tuple(action.series))
    return replace(state, sales_delta=action.delta)


def reduce(state: DashboardState, action: Action) -> DashboardState:
    if isinstance(action, RefreshStarted):
        return replace(state, loading=True, refresh_token=action.token)
    if isinstance(action, RefreshFinished):
        if action.token != state.refresh_token:
            return state
        return replace(state, loading=False)
    if isinstance(action, (KpisLoaded, ProductsLoaded, TransactionsLoaded, SalesSeriesLoaded, SalesDeltaLoaded)):
        return _apply_result(state, action)

    if isinstance(action, SearchChanged):
        return replace(state, search_query=action.query)
    if isinstance(action, TabSelected):
        if action.tab not in TABS:
            raise ValueError(f"Unknown tab: {action.tab}")
        return replace(state, active_tab=action.tab)
    if isinstance(action, TransactionModalOpened):
        txn_type = action.txn_type if action.txn_type in TXN_TYPES else "IN"
        return replace(state, modal_open=True, selected_product_id=action.product_id, modal_txn_type=txn_type)
    if isinstance(action, TransactionModalClosed):
        return replace(state, modal_open=False)
    if isinstance(action, ProductSelected):
        return replace(state, selected_product_id=action.product_id)

    if isinstance(action, LoginSucceeded):
        return replace(state, is_logged_in=True, auth_error="")
    if isinstance(action, LoginFailed):
        return replace(state, is_logged_in=False, auth_error=action.message)
    if isinstance(action, LoggedOut):
        # bump the token so in-flight refresh results are dropped
        return DashboardState(refresh_token=state.refresh_token + 1)

    raise TypeError(f"Unsupported action: {type(action).__name__}")
