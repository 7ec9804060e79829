from __future__ import annotations

import logging
import queue
import tkinter as tk
from tkinter import ttk, messagebox

from rsm.application.state import DashboardState
from rsm.ui.views.add_product_view import AddProductView
from rsm.ui.views.history_view import HistoryView
from rsm.ui.views.login_view import LoginView
from rsm.ui.views.overview_view import OverviewView
from rsm.ui.views.sales_view import SalesView
from rsm.ui.views.transaction_dialog import TransactionDialog

log = logging.getLogger(__name__)

POLL_MS = 100


class App(tk.Tk):
    def __init__(self, controller, logs_dir: str):
        super().__init__()
        self.title("ระบบจัดการสต็อกข้าว — Rice Stock Manager")
        self.geometry("1280x760")
        self.minsize(1080, 640)

        self.controller = controller
        self.logs_dir = logs_dir

        # UI state
        self.status_var = tk.StringVar(value="")
        self._toast_after_id = None
        self._updates: queue.Queue[DashboardState] = queue.Queue()
        self._dialog: TransactionDialog | None = None
        self._was_loading = False

        self._build_styles()

        self.login_view = LoginView(self, self)

        self.main = ttk.Frame(self)
        self._build_topbar()

        body = ttk.Frame(self.main)
        body.pack(fill="both", expand=True, padx=12, pady=(0, 8))

        self.sidebar = ttk.Frame(body)
        self.sidebar.pack(side="left", fill="y", padx=(0, 10))

        self.content = ttk.Frame(body)
        self.content.pack(side="right", fill="both", expand=True)

        self.nb = ttk.Notebook(self.content, style="Side.TNotebook")
        self.nb.pack(fill="both", expand=True)

        # Views (tabs hidden)
        self.overview_view = OverviewView(self.nb, self)
        self.add_product_view = AddProductView(self.nb, self)
        self.history_view = HistoryView(self.nb, self)
        self.sales_view = SalesView(self.nb, self)
        self._tab_frames = {
            "overview": self.overview_view.frame,
            "products": self.add_product_view.frame,
            "transactions": self.history_view.frame,
            "sales": self.sales_view.frame,
        }

        self._build_sidebar()
        self._build_status_bar()

        # listeners may fire from the refresh thread; hand snapshots to the Tk loop
        self.controller.subscribe(self._updates.put)
        self.controller.start()
        self.render(self.controller.state)
        self.after(POLL_MS, self._drain_updates)

    def _build_styles(self):
        style = ttk.Style(self)
        style.layout("Side.TNotebook.Tab", [])
        style.configure("Side.TNotebook", tabmargins=0)

        try:
            style.configure("Big.TButton", padding=(14, 10))
            style.configure("Title.TLabel", font=("Segoe UI", 12, "bold"))
            style.configure("KPI.TLabel", font=("Segoe UI", 10))
            style.configure("KPIValue.TLabel", font=("Segoe UI", 14, "bold"))
            style.configure("DeltaUp.TLabel", foreground="#059669", font=("Segoe UI", 9, "bold"))
            style.configure("DeltaDown.TLabel", foreground="#dc2626", font=("Segoe UI", 9, "bold"))
            style.configure("Error.TLabel", foreground="#dc2626")
        except tk.TclError as e:
            log.exception("UI style setup failed: %s", e)

    def _build_topbar(self):
        top = ttk.Frame(self.main)
        top.pack(fill="x", padx=12, pady=10)

        ttk.Label(top, text="🌾 ระบบจัดการสต็อกข้าว", style="Title.TLabel").pack(side="left")
        ttk.Button(top, text="ออกจากระบบ", command=self.on_logout).pack(side="right")

    def _build_sidebar(self):
        box = ttk.LabelFrame(self.sidebar, text="เมนู")
        box.pack(fill="x", pady=(0, 10))

        tabs = [
            ("overview", "📋 แผงควบคุม"),
            ("products", "➕ เพิ่มสินค้า"),
            ("transactions", "🕘 ประวัติรายการ"),
            ("sales", "📈 วิเคราะห์การขาย"),
        ]
        for i, (tab_id, label) in enumerate(tabs):
            ttk.Button(
                box, text=label, style="Big.TButton",
                command=lambda t=tab_id: self.controller.select_tab(t),
            ).pack(fill="x", padx=10, pady=(10 if i == 0 else 6, 6))

        ttk.Button(box, text="🔄 รีเฟรช", style="Big.TButton",
                   command=self.controller.refresh_all_async).pack(fill="x", padx=10, pady=(6, 10))

    def _build_status_bar(self):
        bar = ttk.Frame(self.main)
        bar.pack(fill="x", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")
        ttk.Label(bar, text=f"Logs: {self.logs_dir}").pack(side="right")

    def toast(self, msg: str, kind: str = "info", ms: int = 2500):
        prefix = {"info": "ℹ ", "success": "✅ ", "warn": "⚠ ", "error": "❌ "}.get(kind, "")
        self.status_var.set(prefix + msg)
        if self._toast_after_id is not None:
            self.after_cancel(self._toast_after_id)
        self._toast_after_id = self.after(ms, lambda: self.status_var.set(""))

    def show_error(self, title: str, message: str):
        messagebox.showerror(title, message, parent=self._dialog.window if self._dialog else self)

    # ---------- state -> widgets ----------
    def _drain_updates(self):
        changed = False
        while True:
            try:
                self._updates.get_nowait()
            except queue.Empty:
                break
            changed = True
        if changed:
            self.render(self.controller.state)
        self.after(POLL_MS, self._drain_updates)

    def render(self, state: DashboardState):
        if not state.is_logged_in:
            self._close_dialog()
            self.overview_view.reset()
            self.main.pack_forget()
            self.login_view.show(state)
            return

        self.login_view.hide()
        if not self.main.winfo_ismapped():
            self.main.pack(fill="both", expand=True)

        self.nb.select(self._tab_frames[state.active_tab])
        self.overview_view.render(state)
        self.history_view.render(state)
        self.sales_view.render(state)

        if state.modal_open and self._dialog is None:
            self._dialog = TransactionDialog(self, state)
        elif not state.modal_open:
            self._close_dialog()

        if self._was_loading and not state.loading:
            self.toast("อัปเดตข้อมูลแล้ว", kind="info", ms=1200)
        self._was_loading = state.loading

    def _close_dialog(self):
        if self._dialog is not None:
            self._dialog.destroy()
            self._dialog = None

    # ---------- intents ----------
    def on_logout(self):
        self.controller.logout()
        self.render(self.controller.state)
