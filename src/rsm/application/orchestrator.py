from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Callable, Optional

from rsm.application.state import (
    Action,
    DashboardState,
    KpisLoaded,
    LoggedOut,
    LoginFailed,
    LoginSucceeded,
    ProductSelected,
    ProductsLoaded,
    RefreshFinished,
    RefreshStarted,
    SalesDeltaLoaded,
    SalesSeriesLoaded,
    SearchChanged,
    TabSelected,
    TransactionModalClosed,
    TransactionModalOpened,
    TransactionsLoaded,
    reduce,
)
from rsm.domain.errors import AuthorizationError
from rsm.domain.models import MutationResult, Product
from rsm.services.auth_service import AuthService
from rsm.services.inventory_service import InventoryService
from rsm.services.reporting_service import (
    ReportingService,
    compute_sales_delta,
    compute_sales_series,
    delta_windows,
    series_window_start,
    sum_qty,
)
from rsm.services.transaction_service import TransactionService

log = logging.getLogger(__name__)

Listener = Callable[[DashboardState], None]


class DashboardController:
    """Owns the dashboard view state and the load/refresh/mutate workflows.

    Every change goes through ``dispatch`` so listeners (the UI) see one
    consistent snapshot per transition. ``refresh_all`` fans the six reads out
    on a thread pool; each result only touches its own slice of state.
    """

    def __init__(
        self,
        inventory: InventoryService,
        transactions: TransactionService,
        reporting: ReportingService,
        auth: AuthService,
        clock: Callable[[], datetime] = datetime.now,
        async_refresh: bool = False,
        max_workers: int = 6,
    ):
        self.inventory = inventory
        self.transactions = transactions
        self.reporting = reporting
        self.auth = auth
        self.clock = clock
        self.async_refresh = async_refresh
        self.max_workers = max_workers

        self._state = DashboardState()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    # ---------- state ----------
    @property
    def state(self) -> DashboardState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, snapshot: DashboardState) -> None:
        # called with the lock held so listeners see snapshots in dispatch order
        for listener in list(self._listeners):
            listener(snapshot)

    def dispatch(self, action: Action) -> DashboardState:
        with self._lock:
            self._state = reduce(self._state, action)
            self._notify(self._state)
            return self._state

    def _begin_refresh(self) -> int:
        with self._lock:
            token = self._state.refresh_token + 1
            self._state = reduce(self._state, RefreshStarted(token))
            self._notify(self._state)
            return token

    # ---------- lifecycle ----------
    def start(self) -> None:
        if self.auth.is_logged_in():
            self.dispatch(LoginSucceeded())
            self._schedule_refresh()

    def login(self, username: str, password: str) -> bool:
        try:
            self.auth.login(username, password)
        except AuthorizationError as e:
            self.dispatch(LoginFailed(str(e)))
            return False
        self.dispatch(LoginSucceeded())
        self._schedule_refresh()
        return True

    def logout(self) -> None:
        self.auth.logout()
        self.dispatch(LoggedOut())

    # ---------- refresh ----------
    def _schedule_refresh(self) -> None:
        if self.async_refresh:
            self.refresh_all_async()
        else:
            self.refresh_all()

    def refresh_all_async(self) -> threading.Thread:
        t = threading.Thread(target=self.refresh_all, name="refresh-all", daemon=True)
        t.start()
        return t

    def refresh_all(self) -> Optional[int]:
        if not self._state.is_logged_in:
            log.info("refresh_skipped reason=not_logged_in")
            return None

        token = self._begin_refresh()
        now = self.clock()
        (cur_start, cur_end), (prev_start, prev_end) = delta_windows(now)

        jobs: dict[str, Callable[[], object]] = {
            "kpis": self.reporting.fetch_kpis,
            "products": self.inventory.fetch_products,
            "transactions": self.transactions.fetch_transactions,
            "series": lambda: self.reporting.fetch_sales_window(series_window_start(now)),
            "current": lambda: self.reporting.fetch_sales_window(cur_start, cur_end),
            "previous": lambda: self.reporting.fetch_sales_window(prev_start, prev_end),
        }
        windows: dict[str, object] = {}
        failed: list[str] = []

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="fetch") as pool:
                futures = {pool.submit(fn): name for name, fn in jobs.items()}
                for fut in as_completed(futures):
                    name = futures[fut]
                    try:
                        result = fut.result()
                    except Exception as e:
                        log.exception("fetch_crashed slice=%s error=%s", name, e)
                        result = None
                    if result is None:
                        failed.append(name)
                        continue
                    self._apply(name, result, token, now, windows)
        finally:
            self.dispatch(RefreshFinished(token))

        if failed:
            log.warning("refresh_partial token=%s failed=%s", token, ",".join(sorted(failed)))
        else:
            log.info("refresh_ok token=%s", token)
        return token

    def _apply(self, name: str, result, token: int, now: datetime, windows: dict) -> None:
        if name == "kpis":
            self.dispatch(KpisLoaded(token, result))
        elif name == "products":
            self.dispatch(ProductsLoaded(token, tuple(result)))
        elif name == "transactions":
            self.dispatch(TransactionsLoaded(token, tuple(result)))
        elif name == "series":
            self.dispatch(SalesSeriesLoaded(token, tuple(compute_sales_series(result, now.date()))))
        else:
            windows[name] = result
            if "current" in windows and "previous" in windows:
                delta = compute_sales_delta(sum_qty(windows["current"]), sum_qty(windows["previous"]))
                self.dispatch(SalesDeltaLoaded(token, delta))

    # ---------- view intents ----------
    def set_search(self, query: str) -> None:
        self.dispatch(SearchChanged(query))

    def visible_products(self) -> list[Product]:
        return self._state.visible_products

    def select_tab(self, tab: str) -> None:
        self.dispatch(TabSelected(tab))

    def select_product(self, product_id: str) -> None:
        self.dispatch(ProductSelected(product_id))

    def open_transaction_modal(self, product_id: str = "", txn_type: str = "IN") -> None:
        self.dispatch(TransactionModalOpened(product_id=product_id, txn_type=txn_type))

    def close_transaction_modal(self) -> None:
        self.dispatch(TransactionModalClosed())

    # ---------- mutations ----------
    def submit_product(self, form: dict) -> MutationResult:
        result = self.inventory.create_product(form)
        if result.ok:
            self.dispatch(TabSelected("overview"))
            self._schedule_refresh()
        return result

    def submit_transaction(
        self,
        txn_type: str,
        product_id: str,
        qty_kg: object,
        ref: object = None,
        note: object = None,
    ) -> MutationResult:
        result = self.transactions.create_transaction(txn_type, product_id, qty_kg, ref, note)
        if result.ok:
            self.dispatch(TransactionModalClosed())
            self._schedule_refresh()
        return result

    def export_snapshot(self, path: str) -> None:
        self.reporting.export_snapshot_excel(path, self._state)
