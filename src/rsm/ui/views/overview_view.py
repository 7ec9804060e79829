from __future__ import annotations

import tkinter as tk
from tkinter import ttk

STATUS_LABELS = {"ok": "ปกติ", "low": "เหลือน้อย", "out": "หมด"}


class OverviewView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Overview")

        self.search_var = tk.StringVar(value="")
        self.search_var.trace_add("write", lambda *_: self.app.controller.set_search(self.search_var.get()))
        self._rendered_key = None
        self._build()

    def _build(self):
        tab = self.frame

        kpi = ttk.Frame(tab)
        kpi.pack(fill="x", padx=10, pady=10)
        for c in range(4):
            kpi.columnconfigure(c, weight=1)

        self.k_stock = self._kpi_box(kpi, "สต็อกทั้งหมด", 0)
        self.k_skus = self._kpi_box(kpi, "สินค้าทั้งหมด", 1)
        self.k_low = self._kpi_box(kpi, "สินค้าใกล้หมด", 2)
        self.k_sales = self._kpi_box(kpi, "ยอดขาย 7 วันล่าสุด", 3)
        self.k_delta = ttk.Label(self.k_sales.master, text="")
        self.k_delta.pack(anchor="w", padx=10, pady=(0, 8))

        box = ttk.LabelFrame(tab, text="สต็อกคงเหลือ")
        box.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        top = ttk.Frame(box)
        top.pack(fill="x", padx=10, pady=8)
        ttk.Label(top, text="🔍").pack(side="left")
        search = ttk.Entry(top, textvariable=self.search_var, width=40)
        search.pack(side="left", padx=6)

        ttk.Button(top, text="➕ บันทึกรายการ", command=lambda: self._open_modal("IN", use_selection=False))\
            .pack(side="right")
        ttk.Button(top, text="📤 ขาย", command=lambda: self._open_modal("OUT")).pack(side="right", padx=6)
        ttk.Button(top, text="📥 รับเข้า", command=lambda: self._open_modal("IN")).pack(side="right")

        cols = ("name", "name_th", "pack", "on_hand", "status")
        self.tree = ttk.Treeview(box, columns=cols, show="headings", height=18)
        heads = {"name": "สินค้า", "name_th": "ชื่อไทย", "pack": "ขนาดบรรจุ (กก.)",
                 "on_hand": "คงเหลือ (กก.)", "status": "สถานะ"}
        widths = {"name": 260, "name_th": 200, "pack": 120, "on_hand": 120, "status": 100}
        for c in cols:
            self.tree.heading(c, text=heads[c])
            self.tree.column(c, width=widths[c], anchor="w")
        self.tree.tag_configure("low", background="#fef3c7")
        self.tree.tag_configure("out", background="#fee2e2")
        self.tree.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        self.empty_var = tk.StringVar(value="")
        ttk.Label(box, textvariable=self.empty_var).pack(pady=(0, 8))

    def _kpi_box(self, parent, label: str, col: int) -> ttk.Label:
        f = ttk.LabelFrame(parent, text=label)
        f.grid(row=0, column=col, sticky="nsew", padx=6)
        value = ttk.Label(f, text="0", style="KPIValue.TLabel")
        value.pack(anchor="w", padx=10, pady=(8, 4))
        return value

    def _open_modal(self, txn_type: str, use_selection: bool = True):
        product_id = ""
        if use_selection:
            sel = self.tree.selection()
            if not sel:
                self.app.toast("เลือกสินค้าก่อน", kind="warn")
                return
            product_id = sel[0]
        self.app.controller.open_transaction_modal(product_id=product_id, txn_type=txn_type)

    def render(self, state):
        k = state.kpis_or_default
        self.k_stock.config(text=f"{k.total_stock_kg:,.2f} กก.")
        self.k_skus.config(text=str(k.sku_count))
        self.k_low.config(text=str(k.low_stock_count))
        self.k_sales.config(text=f"{k.sales_7d_kg:,.2f} กก.")

        d = state.sales_delta
        if d is None:
            self.k_delta.config(text="")
        else:
            arrow = "↑" if d.is_positive else "↓"
            self.k_delta.config(
                text=f"{arrow} {abs(d.value):.1f}% จากสัปดาห์ก่อน",
                style="DeltaUp.TLabel" if d.is_positive else "DeltaDown.TLabel",
            )

        visible = state.visible_products
        key = (state.loading, tuple(visible))
        if key == self._rendered_key:
            return
        self._rendered_key = key

        self.tree.delete(*self.tree.get_children())
        if state.loading and not state.products:
            self.empty_var.set("กำลังโหลดข้อมูล...")
            return
        self.empty_var.set("" if visible else "ไม่พบข้อมูลสินค้า")
        for p in visible:
            self.tree.insert(
                "", "end", iid=p.product_id,
                values=(p.name, p.name_th or "", f"{p.pack_size_kg:.2f}", f"{p.on_hand_kg:.2f}", STATUS_LABELS[p.status]),
                tags=(p.status,) if p.status != "ok" else (),
            )

    def reset(self):
        if self.search_var.get():
            self.search_var.set("")
        self._rendered_key = None
